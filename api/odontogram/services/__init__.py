# api/odontogram/services/__init__.py
from .condicion_store import CondicionStore
from .captura_diagnostico import CapturaDiagnostico, EstadoFlujo
from .estado_diente_service import CeldaDiente, EstadoDienteService
from .leyenda_service import LeyendaService
from .notificaciones import NotificadorLog, NotificadorMemoria
from .odontograma_service import OdontogramaService

__all__ = [
    'CondicionStore',
    'CapturaDiagnostico',
    'EstadoFlujo',
    'CeldaDiente',
    'EstadoDienteService',
    'LeyendaService',
    'NotificadorLog',
    'NotificadorMemoria',
    'OdontogramaService',
]
