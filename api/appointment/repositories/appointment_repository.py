# api/appointment/repositories/appointment_repository.py
from django.utils import timezone

from ..models import Cita, EstadoCita


class CitaRepository:
    """Repositorio para operaciones de base de datos de Citas"""

    @staticmethod
    def proxima_cita_con_odontologo(paciente_id):
        """
        Cita vigente más próxima (hoy o futura) del paciente con un
        odontólogo asignado. Ordena por fecha y luego por hora de inicio.
        """
        return Cita.objects.filter(
            paciente_id=paciente_id,
            fecha__gte=timezone.localdate(),
            activo=True,
            odontologo__isnull=False,
        ).exclude(
            estado=EstadoCita.CANCELADA
        ).order_by('fecha', 'hora_inicio').first()

    @staticmethod
    def odontologo_por_defecto(paciente_id):
        """Retorna el id del odontólogo de contexto o None"""
        cita = CitaRepository.proxima_cita_con_odontologo(paciente_id)
        return cita.odontologo_id if cita else None
