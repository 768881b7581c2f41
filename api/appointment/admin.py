# api/appointment/admin.py
from django.contrib import admin

from .models import Cita


@admin.register(Cita)
class CitaAdmin(admin.ModelAdmin):
    list_display = ('paciente', 'odontologo', 'fecha', 'hora_inicio', 'estado', 'activo')
    list_filter = ('estado', 'activo', 'fecha')
    search_fields = ('paciente__nombres', 'paciente__apellidos', 'odontologo__nombres', 'odontologo__apellidos')
    date_hierarchy = 'fecha'
    raw_id_fields = ('paciente', 'odontologo')
