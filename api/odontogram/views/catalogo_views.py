# api/odontogram/views/catalogo_views.py

"""
Endpoints de lectura del catálogo

- Leyenda del odontograma (condiciones, estados, superficies, indicadores)
- Odontólogo por defecto de un paciente
"""

import logging

from django.core.cache import cache
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.odontogram.serializers import UserMinimalSerializer
from api.odontogram.services import LeyendaService
from api.odontogram.services.odontologo_service import OdontologoPorDefectoService

logger = logging.getLogger(__name__)

CACHE_LEYENDA = "odontograma:leyenda"


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def leyenda(request):
    """GET /api/odontogram/leyenda/"""
    cached_data = cache.get(CACHE_LEYENDA)
    if cached_data:
        return Response(cached_data, status=status.HTTP_200_OK)

    data = LeyendaService.leyenda()
    cache.set(CACHE_LEYENDA, data, timeout=3600)
    return Response(data, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def odontologo_por_defecto(request, paciente_id):
    """
    GET /api/odontogram/pacientes/{id}/odontologo-por-defecto/?odontologo=<id>

    `odontologo` es el odontólogo ya elegido en pantalla y tiene prioridad
    sobre el de la próxima cita.
    """
    preseleccionado = request.query_params.get('odontologo') or None
    odontologo = OdontologoPorDefectoService().resolver(paciente_id, preseleccionado)

    logger.debug(f"Odontólogo por defecto de {paciente_id}: {getattr(odontologo, 'id', None)}")
    return Response({
        'paciente_id': str(paciente_id),
        'odontologo_id': str(odontologo.id) if odontologo else None,
        'odontologo': UserMinimalSerializer(odontologo).data if odontologo else None,
    })
