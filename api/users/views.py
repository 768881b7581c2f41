# users/views.py
import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.utils.exceptions import PersistenciaError, ServicioNoDisponible
from .repositories.user_repository import UserRepository
from .serializers import PerfilOdontologoSerializer

logger = logging.getLogger(__name__)


class PerfilOdontologoView(APIView):
    """
    GET   /api/users/perfil-odontologo/  -> perfil del usuario autenticado
    PATCH /api/users/perfil-odontologo/  -> actualiza el perfil profesional
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(PerfilOdontologoSerializer(request.user).data)

    def patch(self, request):
        serializer = PerfilOdontologoSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            usuario = UserRepository.guardar_perfil_odontologo(
                request.user, serializer.validated_data
            )
        except PersistenciaError as e:
            logger.warning(f"No se pudo guardar el perfil de {request.user.id}: {e.motivo}")
            raise ServicioNoDisponible()

        data = PerfilOdontologoSerializer(usuario).data
        data['message'] = 'Perfil actualizado correctamente'
        return Response(data)
