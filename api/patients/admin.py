# api/patients/admin.py
from django.contrib import admin

from .models.paciente import Paciente


@admin.register(Paciente)
class PacienteAdmin(admin.ModelAdmin):
    list_display = ('cedula_pasaporte', 'nombre_completo', 'telefono', 'correo', 'activo', 'fecha_creacion')
    list_filter = ('activo',)
    search_fields = ('cedula_pasaporte', 'nombres', 'apellidos', 'correo')
    readonly_fields = ('creado_por', 'actualizado_por', 'fecha_creacion', 'fecha_modificacion')
