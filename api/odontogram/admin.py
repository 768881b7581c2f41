# api/odontogram/admin.py

from django.contrib import admin
from .models import CapturaOdontograma, CondicionDental, Odontograma


# INLINE: Condiciones dentro del Odontograma
class CondicionDentalInline(admin.TabularInline):
    """Las condiciones solo se agregan; aquí se consultan"""
    model = CondicionDental
    extra = 0
    fields = (
        'numero_diente',
        'diente_fin_rango',
        'superficies',
        'tipo_condicion',
        'estado',
        'costo',
        'fecha_creacion',
        'activo',
    )
    readonly_fields = ('fecha_creacion',)
    ordering = ['id']


@admin.register(Odontograma)
class OdontogramaAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'paciente', 'tipo', 'fecha', 'activo')
    list_filter = ('tipo', 'activo', 'fecha')
    search_fields = ('nombre', 'paciente__nombres', 'paciente__apellidos', 'paciente__cedula_pasaporte')
    readonly_fields = ('fecha_creacion', 'fecha_modificacion')
    inlines = [CondicionDentalInline]


@admin.register(CondicionDental)
class CondicionDentalAdmin(admin.ModelAdmin):
    list_display = ('descriptor_diente', 'tipo_condicion', 'estado', 'costo', 'odontograma', 'fecha_creacion')
    list_filter = ('tipo_condicion', 'estado', 'activo')
    search_fields = ('odontograma__paciente__apellidos', 'notas')
    readonly_fields = ('fecha_creacion', 'creado_por', 'ip_creacion')


@admin.register(CapturaOdontograma)
class CapturaOdontogramaAdmin(admin.ModelAdmin):
    list_display = ('odontograma', 'fecha_captura')
    readonly_fields = ('fecha_captura',)
