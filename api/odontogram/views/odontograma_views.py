# api/odontogram/views/odontograma_views.py

import logging

from django.http import HttpResponse
from django.utils import timezone

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.odontogram.exceptions import PersistenciaError
from api.odontogram.repositories.odontogram_repositories import (
    CondicionDentalRepository,
    OdontogramaRepository,
)
from api.odontogram.serializers import (
    CapturaUploadSerializer,
    CondicionDentalSerializer,
    DiagnosticoInputSerializer,
    OdontogramaCreateSerializer,
    OdontogramaSerializer,
)
from api.odontogram.services import (
    CapturaDiagnostico,
    CondicionStore,
    EstadoDienteService,
    LeyendaService,
    NotificadorMemoria,
    OdontogramaService,
)
from api.odontogram.services.captura_diagnostico import MENSAJE_ERROR_GUARDADO
from api.odontogram.services.odontograma_capture_service import OdontogramaCaptureService
from api.odontogram.services.odontologo_service import OdontologoPorDefectoService
from api.odontogram.services.pdf.odontograma_pdf_generator import (
    OdontogramaPDFGenerator,
    nombre_archivo,
)
from api.odontogram.services.pdf.renderizador_odontograma import (
    RenderizadorOdontograma,
    handle_odontograma,
)
from api.utils.renderers import PDFRenderer

logger = logging.getLogger(__name__)


class OdontogramaViewSet(mixins.ListModelMixin,
                         mixins.RetrieveModelMixin,
                         viewsets.GenericViewSet):
    """
    Versiones del odontograma y sus diagnósticos.

    GET  /api/odontogram/odontogramas/?paciente=<id>
    GET  /api/odontogram/odontogramas/actual/?paciente=<id>
    POST /api/odontogram/odontogramas/
    """

    permission_classes = [IsAuthenticated]
    serializer_class = OdontogramaSerializer

    def get_queryset(self):
        return OdontogramaService().versiones(self.request.query_params.get('paciente'))

    @action(detail=False, methods=['get'])
    def actual(self, request):
        """
        Versión vigente del paciente.

        Query params:
            paciente     (obligatorio)
            odontograma  Versión preseleccionada; debe pertenecer al paciente.
        """
        paciente_id = request.query_params.get('paciente')
        if not paciente_id:
            raise ValidationError({'paciente': ["Este parámetro es obligatorio."]})

        odontograma = OdontogramaService().odontograma_actual(
            paciente_id, request.query_params.get('odontograma')
        )
        if odontograma is None:
            raise NotFound("El paciente no tiene odontogramas")
        return Response(OdontogramaSerializer(odontograma).data)

    def create(self, request):
        serializer = OdontogramaCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        odontograma = OdontogramaService().crear_version(
            paciente=datos['paciente'],
            nombre=datos['nombre'],
            tipo=datos['tipo'],
            fecha=datos.get('fecha'),
            notas=datos.get('notas', ''),
        )
        data = OdontogramaSerializer(odontograma).data
        data['message'] = 'Odontograma creado correctamente'
        return Response(data, status=status.HTTP_201_CREATED)

    # ── Condiciones ────────────────────────────────────────────────────────

    @action(detail=True, methods=['get', 'post'])
    def condiciones(self, request, pk=None):
        """
        GET  -> detalle de diagnósticos en orden de registro
        POST -> registra un diagnóstico a través del flujo de captura
        """
        odontograma = self.get_object()
        if request.method == 'GET':
            queryset = CondicionDentalRepository().get_by_odontograma(odontograma.id)
            return Response(CondicionDentalSerializer(queryset, many=True).data)

        serializer = DiagnosticoInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        datos = serializer.validated_data

        notificador = NotificadorMemoria()
        flujo = CapturaDiagnostico(
            odontograma,
            CondicionStore.desde_odontograma(odontograma),
            CondicionDentalRepository(),
            notificador,
            odontologo=OdontologoPorDefectoService().resolver(
                odontograma.paciente_id, datos.get('odontologo')
            ),
            ip_creacion=request.META.get('REMOTE_ADDR'),
        )

        # Errores de validación del flujo -> 400 vía custom_exception_handler
        flujo.abrir(datos['numero_diente'], diente_fin_rango=datos.get('diente_fin_rango'))
        for superficie in dict.fromkeys(datos['superficies']):
            flujo.alternar_superficie(superficie)
        flujo.seleccionar_condicion(datos['tipo_condicion'])
        flujo.seleccionar_estado(datos['estado'])
        flujo.escribir_notas(datos.get('notas'))
        flujo.fijar_costo(datos.get('costo'))

        try:
            condicion = flujo.enviar()
        except PersistenciaError as e:
            logger.warning(f"Diagnóstico no guardado en odontograma {odontograma.id}: {e.motivo}")
            return Response(
                {
                    'message': MENSAJE_ERROR_GUARDADO,
                    'non_field_errors': flujo.errores.get('__all__', []),
                    'datos': _datos_formulario(flujo.datos()),
                    'notificaciones': notificador.como_lista(),
                },
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        data = CondicionDentalSerializer(condicion).data
        data['notificaciones'] = notificador.como_lista()
        return Response(data, status=status.HTTP_201_CREATED)

    # ── Estado visual ──────────────────────────────────────────────────────

    @action(detail=True, methods=['get'])
    def dientes(self, request, pk=None):
        """Estado derivado de cada posición de las arcadas"""
        odontograma = self.get_object()
        store = CondicionStore.desde_odontograma(odontograma)
        return Response(EstadoDienteService.estados_odontograma(store))

    @action(detail=True, methods=['get'])
    def resumen(self, request, pk=None):
        odontograma = self.get_object()
        store = CondicionStore.desde_odontograma(odontograma)
        return Response(LeyendaService.resumen(store.todas()))

    # ── Captura y reporte ──────────────────────────────────────────────────

    @action(detail=True, methods=['post'])
    def captura(self, request, pk=None):
        """Sube la imagen del gráfico generada en el cliente"""
        odontograma = self.get_object()
        serializer = CapturaUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        resultado = OdontogramaCaptureService.guardar_imagen(
            odontograma,
            serializer.validated_data['imagen'],
            serializer.validated_data.get('observaciones'),
        )
        if not resultado['success']:
            raise ValidationError({'imagen': [resultado['error']]})

        resultado.pop('success')
        created = resultado.pop('created')
        return Response(resultado, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='pdf', renderer_classes=[PDFRenderer])
    def pdf(self, request, pk=None):
        """
        Reporte PDF del odontograma.

        Query params:
            handle  Gráfico a incluir (odontograma-<id> o captura-<id>).
                    Por defecto, el gráfico generado en el servidor.
        """
        odontograma = OdontogramaRepository().get_by_id(pk)
        if odontograma is None:
            # El renderer de la acción es PDF: el error se arma a mano
            return HttpResponse(
                '{"detail": "Odontograma no encontrado"}',
                content_type='application/json',
                status=404,
            )
        paciente = odontograma.paciente
        handle = request.query_params.get('handle') or handle_odontograma(odontograma)
        fecha = timezone.localdate()

        condiciones = list(CondicionDentalRepository().get_by_odontograma(odontograma.id))
        pdf_bytes = OdontogramaPDFGenerator(RenderizadorOdontograma()).generar(
            odontograma,
            condiciones,
            nombre_paciente=paciente.nombre_reporte,
            email_paciente=paciente.correo,
            telefono_paciente=paciente.telefono,
            handle=handle,
            fecha_generacion=fecha,
        )

        response = HttpResponse(pdf_bytes, content_type='application/pdf')
        response['Content-Disposition'] = (
            f'attachment; filename="{nombre_archivo(paciente.nombre_reporte, fecha)}"'
        )
        return response


def _datos_formulario(datos):
    """Datos del formulario aptos para JSON (costo como texto)."""
    datos = dict(datos)
    if datos.get('costo') is not None:
        datos['costo'] = str(datos['costo'])
    return datos
