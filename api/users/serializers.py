from rest_framework import serializers
from .models import Usuario


class PerfilOdontologoSerializer(serializers.ModelSerializer):
    """Perfil profesional editable por el propio odontólogo"""
    nombre_completo = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = Usuario
        fields = [
            'id', 'username', 'rol', 'nombre_completo',
            'nombres', 'apellidos', 'telefono', 'correo',
            'especialidad', 'registro_profesional', 'biografia', 'anios_experiencia',
            'fecha_modificacion',
        ]
        read_only_fields = ['id', 'username', 'rol', 'fecha_modificacion']

    def validate_nombres(self, value):
        if not value or len(value.strip()) == 0:
            raise serializers.ValidationError("El nombre es requerido.")
        return value.strip()

    def validate_apellidos(self, value):
        if not value or len(value.strip()) == 0:
            raise serializers.ValidationError("El apellido es requerido.")
        return value.strip()

    def validate_correo(self, value):
        qs = Usuario.objects.filter(correo__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Este correo ya está registrado.")
        return value.lower()
