# api/odontogram/urls.py
"""
URLs de la API REST del Odontograma
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.odontogram.views import (
    OdontogramaViewSet,
    leyenda,
    odontologo_por_defecto,
)

app_name = "odontogram"

# ==================== ROUTER SETUP ====================

router = DefaultRouter()
router.register(r"odontogramas", OdontogramaViewSet, basename="odontograma")

urlpatterns = [
    path("", include(router.urls)),
    path("leyenda/", leyenda, name="leyenda"),
    path(
        "pacientes/<uuid:paciente_id>/odontologo-por-defecto/",
        odontologo_por_defecto,
        name="odontologo-por-defecto",
    ),
]
