# api/odontogram/repositories/odontogram_repositories.py
"""
Repository Pattern: acceso a datos del odontograma.

CondicionDentalRepository es el colaborador de persistencia del flujo de
captura: cualquier rechazo del almacenamiento se entrega como
PersistenciaError con el motivo.
"""
import logging
from typing import Any, List, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import QuerySet

from api.odontogram.exceptions import PersistenciaError
from api.odontogram.models import CapturaOdontograma, CondicionDental, Odontograma

logger = logging.getLogger(__name__)


class BaseRepository:
    """Repositorio base con operaciones comunes"""

    model = None

    def get_by_id(self, id) -> Optional[Any]:
        """Obtiene un registro activo por ID"""
        try:
            return self.model.objects.get(id=id, activo=True)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            return None

    def get_all(self) -> QuerySet:
        """Obtiene todos los registros activos"""
        return self.model.objects.filter(activo=True)


class OdontogramaRepository(BaseRepository):

    model = Odontograma

    def get_versiones(self, paciente_id=None) -> QuerySet:
        """Versiones activas: fecha clínica desc, luego creación desc"""
        queryset = self.get_all().select_related('paciente')
        if paciente_id:
            queryset = queryset.filter(paciente_id=paciente_id)
        return queryset.order_by('-fecha', '-fecha_creacion')

    def get_ultimo(self, paciente_id) -> Optional[Odontograma]:
        return self.get_versiones(paciente_id).first()

    def crear(self, **kwargs) -> Odontograma:
        odontograma = Odontograma(**kwargs)
        odontograma.full_clean()
        odontograma.save()
        return odontograma


class CondicionDentalRepository(BaseRepository):

    model = CondicionDental

    def get_by_odontograma(self, odontograma_id) -> QuerySet:
        """Condiciones activas en orden de inserción"""
        return self.get_all().filter(odontograma_id=odontograma_id).order_by('id')

    def guardar_condicion(self, condicion: CondicionDental) -> CondicionDental:
        try:
            condicion.full_clean()
            with transaction.atomic():
                condicion.save()
        except ValidationError as e:
            raise PersistenciaError(
                f"Registro rechazado: {'; '.join(e.messages)}", entidad='condicion_dental'
            ) from e
        except DatabaseError as e:
            logger.error(f"Error de base de datos guardando condición: {e}", exc_info=True)
            raise PersistenciaError(str(e), entidad='condicion_dental') from e
        return condicion

    def copiar_a(self, origen: Odontograma, destino: Odontograma) -> List[CondicionDental]:
        """Copia las condiciones activas de `origen` a `destino`, mismo orden."""
        copias = [
            CondicionDental(
                odontograma=destino,
                numero_diente=c.numero_diente,
                diente_fin_rango=c.diente_fin_rango,
                superficies=list(c.superficies),
                tipo_condicion=c.tipo_condicion,
                estado=c.estado,
                notas=c.notas,
                costo=c.costo,
                fecha_creacion=c.fecha_creacion,
                odontologo_id=c.odontologo_id,
            )
            for c in self.get_by_odontograma(origen.id)
        ]
        # bulk_create no llama a save(): las superficies ya vienen normalizadas
        return CondicionDental.objects.bulk_create(copias)


class CapturaOdontogramaRepository:

    @staticmethod
    def get_by_odontograma(odontograma_id) -> Optional[CapturaOdontograma]:
        return CapturaOdontograma.objects.filter(odontograma_id=odontograma_id).first()
