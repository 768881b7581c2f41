# api/odontogram/serializers/__init__.py
from .serializers import (
    UserMinimalSerializer,
    OdontogramaSerializer,
    OdontogramaCreateSerializer,
    CondicionDentalSerializer,
    DiagnosticoInputSerializer,
    CapturaUploadSerializer,
)
