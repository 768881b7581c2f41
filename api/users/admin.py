from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import Usuario

@admin.register(Usuario)
class UsuarioAdmin(UserAdmin):
    list_display = ('username', 'correo', 'nombres', 'apellidos', 'rol', 'especialidad', 'is_active')
    list_filter = ('rol', 'is_staff', 'is_active')
    search_fields = ('username', 'correo', 'nombres', 'apellidos')
    readonly_fields = ('creado_por', 'actualizado_por', 'fecha_creacion', 'fecha_modificacion')
    ordering = ('-fecha_creacion',)

    fieldsets = (
        (None, {
            'fields': ('username', 'password')
        }),
        ('Información Personal', {
            'fields': ('nombres', 'apellidos', 'correo', 'telefono', 'rol')
        }),
        ('Perfil profesional', {
            'fields': ('especialidad', 'registro_profesional', 'anios_experiencia', 'biografia')
        }),
        ('Permisos', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')
        }),
        ('Auditoría', {
            'fields': ('creado_por', 'actualizado_por', 'fecha_creacion', 'fecha_modificacion')
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'correo', 'nombres', 'apellidos', 'telefono', 'rol', 'password1', 'password2', 'is_staff', 'is_active')}
        ),
    )
