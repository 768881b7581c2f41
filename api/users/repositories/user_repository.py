# api/users/repositories/user_repository.py
import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from api.utils.exceptions import PersistenciaError
from ..models import Usuario

logger = logging.getLogger(__name__)

CAMPOS_PERFIL = (
    'nombres', 'apellidos', 'telefono', 'correo',
    'especialidad', 'registro_profesional', 'biografia', 'anios_experiencia',
)


class UserRepository:
    @staticmethod
    def get_by_id(user_id):
        return Usuario.objects.filter(id=user_id, is_active=True).first()

    @staticmethod
    def guardar_perfil_odontologo(usuario, datos):
        """
        Guarda el perfil profesional del odontólogo.

        Solo se aplican los campos de perfil; cualquier rechazo del
        almacenamiento se traduce a PersistenciaError.
        """
        for campo in CAMPOS_PERFIL:
            if campo in datos:
                setattr(usuario, campo, datos[campo])

        try:
            usuario.full_clean(exclude=['password'])
            with transaction.atomic():
                usuario.save()
        except ValidationError as e:
            raise PersistenciaError(
                f"Perfil inválido: {'; '.join(e.messages)}", entidad='perfil_odontologo'
            ) from e
        except DatabaseError as e:
            logger.error(f"Error guardando perfil de {usuario.id}: {e}", exc_info=True)
            raise PersistenciaError(str(e), entidad='perfil_odontologo') from e

        logger.info(f"Perfil de odontólogo actualizado: {usuario.id}")
        return usuario
