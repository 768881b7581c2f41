# api/odontogram/serializers/serializers.py
from rest_framework import serializers

from django.contrib.auth import get_user_model

from api.patients.models import Paciente
from api.odontogram.constants import EstadoTratamiento
from api.odontogram.models import CondicionDental, Odontograma


User = get_user_model()


class UserMinimalSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'nombres', 'apellidos', 'correo']


# =============================================================================
# ODONTOGRAMA
# =============================================================================

class OdontogramaSerializer(serializers.ModelSerializer):
    paciente_nombre = serializers.CharField(source='paciente.nombre_completo', read_only=True)
    total_condiciones = serializers.SerializerMethodField()
    tiene_captura = serializers.SerializerMethodField()

    class Meta:
        model = Odontograma
        fields = [
            'id', 'paciente', 'paciente_nombre', 'nombre', 'tipo', 'fecha', 'notas',
            'fecha_creacion', 'total_condiciones', 'tiene_captura',
        ]
        read_only_fields = ['id', 'fecha_creacion']

    def get_total_condiciones(self, obj):
        return obj.condiciones.filter(activo=True).count()

    def get_tiene_captura(self, obj):
        return hasattr(obj, 'captura') and obj.captura.tiene_imagen()


class OdontogramaCreateSerializer(serializers.Serializer):
    """Nueva versión del odontograma; copia las condiciones de la última"""
    paciente = serializers.PrimaryKeyRelatedField(queryset=Paciente.objects.filter(activo=True))
    nombre = serializers.CharField(max_length=150)
    tipo = serializers.ChoiceField(
        choices=Odontograma.TipoOdontograma.choices,
        default=Odontograma.TipoOdontograma.EVOLUCION,
    )
    fecha = serializers.DateField(required=False)
    notas = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_nombre(self, value):
        if not value.strip():
            raise serializers.ValidationError("El nombre es requerido.")
        return value.strip()


# =============================================================================
# CONDICIONES
# =============================================================================

class CondicionDentalSerializer(serializers.ModelSerializer):
    descriptor_diente = serializers.CharField(read_only=True)
    codigos_superficie = serializers.CharField(read_only=True)
    etiqueta = serializers.CharField(read_only=True)
    color = serializers.CharField(read_only=True)
    odontologo = UserMinimalSerializer(read_only=True)

    class Meta:
        model = CondicionDental
        fields = [
            'id', 'numero_diente', 'diente_fin_rango', 'descriptor_diente',
            'superficies', 'codigos_superficie', 'tipo_condicion', 'etiqueta', 'color',
            'estado', 'notas', 'costo', 'fecha_creacion', 'odontologo',
        ]
        read_only_fields = fields


class DiagnosticoInputSerializer(serializers.Serializer):
    """
    Datos del formulario de diagnóstico. La validación de dominio
    (pieza, rango, superficies, condición) la hace el flujo de captura.
    """
    numero_diente = serializers.IntegerField()
    diente_fin_rango = serializers.IntegerField(required=False, allow_null=True)
    superficies = serializers.ListField(
        child=serializers.CharField(), required=False, default=list
    )
    tipo_condicion = serializers.CharField(required=False, allow_blank=True, default='')
    estado = serializers.ChoiceField(
        choices=EstadoTratamiento.choices, default=EstadoTratamiento.PLANIFICADO
    )
    notas = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    costo = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    odontologo = serializers.UUIDField(required=False, allow_null=True)


class CapturaUploadSerializer(serializers.Serializer):
    imagen = serializers.ImageField()
    observaciones = serializers.CharField(required=False, allow_blank=True, default='')
