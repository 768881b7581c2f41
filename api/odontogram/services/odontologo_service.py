# api/odontogram/services/odontologo_service.py
"""
Odontólogo que se asocia a los diagnósticos capturados.

Un odontólogo preseleccionado (elegido explícitamente en la pantalla) tiene
prioridad; si no hay, se usa el de la próxima cita vigente del paciente.
"""
import logging

from api.appointment.repositories import CitaRepository
from api.users.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class OdontologoPorDefectoService:

    def __init__(self, citas=CitaRepository, usuarios=UserRepository):
        self._citas = citas
        self._usuarios = usuarios

    def resolver_id(self, paciente_id, preseleccionado_id=None):
        if preseleccionado_id:
            return preseleccionado_id
        return self._citas.odontologo_por_defecto(paciente_id)

    def resolver(self, paciente_id, preseleccionado_id=None):
        """Usuario odontólogo activo o None."""
        odontologo_id = self.resolver_id(paciente_id, preseleccionado_id)
        if odontologo_id is None:
            return None
        odontologo = self._usuarios.get_by_id(odontologo_id)
        if odontologo is None:
            logger.warning(f"Odontólogo {odontologo_id} no encontrado o inactivo")
        return odontologo
