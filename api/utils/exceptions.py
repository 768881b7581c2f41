# api/utils/exceptions.py
from rest_framework import status
from rest_framework.exceptions import APIException


class PersistenciaError(Exception):
    """El almacenamiento rechazó la operación de guardado."""

    def __init__(self, motivo, entidad=None):
        super().__init__(motivo)
        self.motivo = motivo
        self.entidad = entidad


class ServicioNoDisponible(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'No se pudo guardar la información. Intente nuevamente.'
    default_code = 'persistencia_no_disponible'
