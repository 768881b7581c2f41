# api/appointment/models.py
from django.db import models
from django.core.exceptions import ValidationError
from django_currentuser.db.models import CurrentUserField
from datetime import datetime, timedelta
import uuid


class EstadoCita(models.TextChoices):
    """Estados posibles de una cita"""
    PROGRAMADA = 'PROGRAMADA', 'Programada'
    CONFIRMADA = 'CONFIRMADA', 'Confirmada'
    ASISTIDA = 'ASISTIDA', 'Asistida'
    NO_ASISTIDA = 'NO_ASISTIDA', 'No Asistida'
    CANCELADA = 'CANCELADA', 'Cancelada'
    REPROGRAMADA = 'REPROGRAMADA', 'Reprogramada'
    EN_ATENCION = 'EN_ATENCION', 'En Atención'


class Cita(models.Model):
    """Cita odontológica; define el odontólogo de contexto del paciente"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    paciente = models.ForeignKey(
        'patients.Paciente',
        on_delete=models.CASCADE,
        related_name='citas',
        verbose_name="Paciente"
    )

    # Puede quedar sin asignar hasta que recepción defina el profesional
    odontologo = models.ForeignKey(
        'users.Usuario',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='citas_odontologo',
        limit_choices_to={'rol': 'Odontologo'},
        verbose_name="Odontólogo"
    )

    fecha = models.DateField(verbose_name="Fecha de la cita")
    hora_inicio = models.TimeField(verbose_name="Hora de inicio")
    hora_fin = models.TimeField(null=True, blank=True, verbose_name="Hora de fin")
    duracion = models.IntegerField(default=30, verbose_name="Duración (minutos)")

    estado = models.CharField(
        max_length=20,
        choices=EstadoCita.choices,
        default=EstadoCita.PROGRAMADA,
        verbose_name="Estado"
    )

    motivo_consulta = models.TextField(blank=True, verbose_name="Motivo de consulta")

    # Auditoría
    activo = models.BooleanField(default=True)
    creado_por = CurrentUserField(related_name='citas_creadas', null=True, blank=True, editable=False)
    fecha_creacion = models.DateTimeField(auto_now_add=True)
    fecha_modificacion = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Cita"
        verbose_name_plural = "Citas"
        ordering = ['-fecha', '-hora_inicio']
        indexes = [
            models.Index(fields=['paciente', 'fecha']),
            models.Index(fields=['estado', 'fecha']),
        ]

    def __str__(self):
        return f"Cita: {self.paciente.nombre_completo} - {self.fecha} {self.hora_inicio}"

    def clean(self):
        super().clean()
        if self.hora_fin and self.hora_inicio >= self.hora_fin:
            raise ValidationError("La hora de inicio debe ser menor que la hora de fin")

    def save(self, *args, **kwargs):
        if not self.hora_fin:
            hora_inicio_dt = datetime.combine(datetime.today(), self.hora_inicio)
            self.hora_fin = (hora_inicio_dt + timedelta(minutes=self.duracion)).time()
        super().save(*args, **kwargs)
