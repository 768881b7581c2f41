# patients/models/base.py

#Modelo base con auditoría y borrado lógico
import uuid
from django.db import models
from django.utils import timezone
from django_currentuser.db.models import CurrentUserField

class BaseModel(models.Model):
    """Modelo base abstracto: UUID, usuario creador/actualizador y bandera activo"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, unique=True)

    creado_por = CurrentUserField(
        related_name='%(class)s_creado_por',
        null=True,
        blank=True,
        editable=False,
        verbose_name="Creado por"
    )

    actualizado_por = CurrentUserField(
        on_update=True,
        related_name='%(class)s_actualizado_por',
        null=True,
        blank=True,
        editable=False,
        verbose_name="Actualizado por"
    )

    # Se fija al crear y no vuelve a cambiar
    fecha_creacion = models.DateTimeField(default=timezone.now, editable=False, verbose_name="Fecha de creación")
    fecha_modificacion = models.DateTimeField(auto_now=True, verbose_name="Fecha de modificación")
    activo = models.BooleanField(default=True, verbose_name="Activo")

    class Meta:
        abstract = True

    def desactivar(self):
        """Borrado lógico"""
        self.activo = False
        self.save(update_fields=['activo', 'fecha_modificacion'])
