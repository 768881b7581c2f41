# patients/models/paciente.py
from django.db import models
from django.core.validators import MinLengthValidator, RegexValidator
from django.core.exceptions import ValidationError
from .base import BaseModel

class Paciente(BaseModel):
    """Paciente dueño de los odontogramas"""

    nombres = models.CharField(max_length=100, verbose_name="Nombres completos")
    apellidos = models.CharField(max_length=100, verbose_name="Apellidos completos")

    cedula_pasaporte = models.CharField(max_length=20, unique=True, verbose_name="Cédula/Pasaporte")
    fecha_nacimiento = models.DateField(null=True, blank=True, verbose_name="Fecha de nacimiento")
    telefono = models.CharField(
        max_length=20,
        blank=True,
        validators=[
            MinLengthValidator(10, message="El número de teléfono debe tener al menos 10 dígitos."),
            RegexValidator(regex=r'^\d{10,}$', message="Solo números, mínimo 10 dígitos.")
        ],
        verbose_name="Teléfono"
    )
    correo = models.EmailField(blank=True, verbose_name="Correo electrónico")

    class Meta:
        verbose_name = "Paciente"
        verbose_name_plural = "Pacientes"
        ordering = ['apellidos', 'nombres']
        indexes = [
            models.Index(fields=['apellidos', 'nombres']),
            models.Index(fields=['activo']),
        ]

    def clean(self):
        """Validaciones del formulario"""
        if not self.nombres or not self.apellidos:
            raise ValidationError("Los nombres y apellidos son obligatorios.")
        if not self.cedula_pasaporte:
            raise ValidationError("La cédula o pasaporte es obligatorio.")

    def save(self, *args, **kwargs):
        """Método save con validaciones automáticas"""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.nombre_completo} - {self.cedula_pasaporte}"

    @property
    def nombre_completo(self):
        """Apellidos, Nombres (listados)"""
        return f"{self.apellidos}, {self.nombres}".strip()

    @property
    def nombre_reporte(self):
        """Nombres Apellidos (documentos impresos)"""
        return f"{self.nombres} {self.apellidos}".strip()
