# api/odontogram/services/odontograma_service.py
"""
Versiones del odontograma de un paciente.

La versión vigente es la solicitada explícitamente o, si no se indica,
la más reciente (fecha clínica desc, luego fecha de creación desc).
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from api.odontogram.models import Odontograma
from api.odontogram.repositories.odontogram_repositories import (
    CondicionDentalRepository,
    OdontogramaRepository,
)

logger = logging.getLogger(__name__)


class OdontogramaService:

    def __init__(self, odontogramas=None, condiciones=None):
        self.odontogramas = odontogramas or OdontogramaRepository()
        self.condiciones = condiciones or CondicionDentalRepository()

    def versiones(self, paciente_id=None):
        """QuerySet de versiones, opcionalmente de un solo paciente"""
        return self.odontogramas.get_versiones(paciente_id)

    def listar_versiones(self, paciente_id):
        return list(self.versiones(paciente_id))

    def odontograma_actual(self, paciente_id, odontograma_id=None):
        if odontograma_id:
            odontograma = self.odontogramas.get_by_id(odontograma_id)
            if odontograma is None or str(odontograma.paciente_id) != str(paciente_id):
                raise ValidationError({'odontograma': ["El odontograma no pertenece al paciente"]})
            return odontograma
        return self.odontogramas.get_ultimo(paciente_id)

    @transaction.atomic
    def crear_version(self, paciente, nombre, tipo=Odontograma.TipoOdontograma.EVOLUCION,
                      fecha=None, notas=''):
        """
        Crea una nueva versión copiando las condiciones activas de la
        versión más reciente del paciente.
        """
        anterior = self.odontogramas.get_ultimo(paciente.id)

        datos = {'paciente': paciente, 'nombre': nombre, 'tipo': tipo, 'notas': notas}
        if fecha is not None:
            datos['fecha'] = fecha
        nuevo = self.odontogramas.crear(**datos)

        copiadas = []
        if anterior is not None:
            copiadas = self.condiciones.copiar_a(anterior, nuevo)

        logger.info(
            f"Odontograma '{nombre}' creado para paciente {paciente.id} "
            f"({len(copiadas)} condiciones copiadas)"
        )
        return nuevo
