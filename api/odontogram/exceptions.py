# api/odontogram/exceptions.py
from api.utils.exceptions import PersistenciaError


class CapturaImagenError(Exception):
    """No se pudo obtener la imagen rasterizada del odontograma."""

    def __init__(self, handle, motivo):
        super().__init__(f"No se pudo capturar '{handle}': {motivo}")
        self.handle = handle
        self.motivo = motivo


class FlujoCapturaError(Exception):
    """Operación no permitida en el estado actual del flujo de diagnóstico."""


__all__ = ['CapturaImagenError', 'FlujoCapturaError', 'PersistenciaError']
