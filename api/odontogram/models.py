# api/odontogram/models.py
"""
Modelos del odontograma.

Odontograma         -> versión del gráfico dental de un paciente
CondicionDental     -> hallazgo diagnóstico sobre una pieza o rango de piezas
CapturaOdontograma  -> imagen del gráfico subida desde el cliente
"""
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_currentuser.db.models import CurrentUserField

from api.patients.models import BaseModel, Paciente
from api.odontogram.constants import (
    CATALOGO_CONDICIONES,
    CODIGOS_SUPERFICIE,
    EstadoTratamiento,
    SIN_COLOR,
    TipoCondicion,
    normalizar_superficies,
)
from api.odontogram.validators.validator_fdi import (
    validar_numero_diente,
    validar_rango,
    validar_superficies,
)


class Odontograma(BaseModel):
    """Una versión del odontograma de un paciente"""

    class TipoOdontograma(models.TextChoices):
        INICIAL = 'inicial', 'Inicial'
        EVOLUCION = 'evolucion', 'Evolución'
        PLAN_TRATAMIENTO = 'plan_tratamiento', 'Plan de tratamiento'

    paciente = models.ForeignKey(
        Paciente,
        on_delete=models.CASCADE,
        related_name='odontogramas',
        verbose_name="Paciente"
    )
    nombre = models.CharField(max_length=150, verbose_name="Nombre")
    tipo = models.CharField(
        max_length=20,
        choices=TipoOdontograma.choices,
        default=TipoOdontograma.INICIAL,
        verbose_name="Tipo"
    )
    fecha = models.DateField(default=timezone.localdate, verbose_name="Fecha clínica")
    notas = models.TextField(blank=True, verbose_name="Notas")

    class Meta:
        verbose_name = "Odontograma"
        verbose_name_plural = "Odontogramas"
        ordering = ['-fecha', '-fecha_creacion']
        indexes = [
            models.Index(fields=['paciente', 'activo']),
        ]

    def __str__(self):
        return f"{self.nombre} - {self.paciente.nombre_completo}"


class CondicionDental(models.Model):
    """
    Hallazgo sobre una pieza (o rango de piezas) del odontograma.

    Los registros solo se agregan: una corrección es un registro nuevo con
    fecha posterior. El id autoincremental conserva el orden de inserción.
    """

    odontograma = models.ForeignKey(
        Odontograma,
        on_delete=models.CASCADE,
        related_name='condiciones',
        verbose_name="Odontograma"
    )
    numero_diente = models.PositiveSmallIntegerField(
        validators=[validar_numero_diente],
        verbose_name="Pieza (FDI)"
    )
    diente_fin_rango = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[validar_numero_diente],
        verbose_name="Pieza final del rango"
    )
    superficies = models.JSONField(default=list, verbose_name="Superficies")
    tipo_condicion = models.CharField(
        max_length=40,
        choices=TipoCondicion.choices,
        verbose_name="Condición"
    )
    estado = models.CharField(
        max_length=20,
        choices=EstadoTratamiento.choices,
        default=EstadoTratamiento.PLANIFICADO,
        verbose_name="Estado del tratamiento"
    )
    notas = models.TextField(blank=True, default='', verbose_name="Notas")
    costo = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        verbose_name="Costo"
    )
    fecha_creacion = models.DateTimeField(default=timezone.now, editable=False, verbose_name="Fecha de creación")

    odontologo = models.ForeignKey(
        'users.Usuario',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='condiciones_registradas',
        verbose_name="Odontólogo"
    )
    creado_por = CurrentUserField(
        related_name='condiciones_creadas',
        null=True,
        blank=True,
        editable=False,
        verbose_name="Creado por"
    )
    ip_creacion = models.GenericIPAddressField(null=True, blank=True, verbose_name="IP de creación")
    activo = models.BooleanField(default=True, verbose_name="Activo")

    class Meta:
        verbose_name = "Condición dental"
        verbose_name_plural = "Condiciones dentales"
        ordering = ['id']
        indexes = [
            models.Index(fields=['odontograma', 'numero_diente']),
        ]

    def __str__(self):
        return f"{self.descriptor_diente} - {self.etiqueta} ({self.estado})"

    def clean(self):
        super().clean()
        errores = {}

        try:
            validar_superficies(self.superficies)
        except ValidationError as e:
            errores['superficies'] = e.messages

        if self.diente_fin_rango is not None:
            try:
                validar_rango(self.numero_diente, self.diente_fin_rango)
            except ValidationError as e:
                errores['diente_fin_rango'] = e.messages

        if errores:
            raise ValidationError(errores)

    def save(self, *args, **kwargs):
        self.superficies = normalizar_superficies(self.superficies)
        super().save(*args, **kwargs)

    # ── Propiedades de presentación ─────────────────────────────────────

    @property
    def es_rango(self):
        return self.diente_fin_rango is not None

    @property
    def descriptor_diente(self):
        if self.es_rango:
            return f"{self.numero_diente}-{self.diente_fin_rango}"
        return str(self.numero_diente)

    @property
    def color(self):
        entrada = CATALOGO_CONDICIONES.get(self.tipo_condicion)
        return entrada['color'] if entrada else SIN_COLOR

    @property
    def etiqueta(self):
        # Valores fuera del catálogo se muestran tal cual
        return dict(TipoCondicion.choices).get(self.tipo_condicion, self.tipo_condicion)

    @property
    def codigos_superficie(self):
        return ','.join(CODIGOS_SUPERFICIE.get(s, s) for s in self.superficies or [])


class CapturaOdontograma(models.Model):
    """Imagen PNG del gráfico enviada por el cliente"""

    odontograma = models.OneToOneField(
        Odontograma,
        on_delete=models.CASCADE,
        related_name='captura',
        verbose_name="Odontograma"
    )
    imagen = models.ImageField(upload_to='odontogramas/capturas/', verbose_name="Imagen")
    observaciones = models.TextField(blank=True, verbose_name="Observaciones")
    fecha_captura = models.DateTimeField(auto_now=True, verbose_name="Fecha de captura")

    class Meta:
        verbose_name = "Captura de odontograma"
        verbose_name_plural = "Capturas de odontograma"

    def __str__(self):
        return f"Captura {self.odontograma_id}"

    def tiene_imagen(self):
        return bool(self.imagen)
