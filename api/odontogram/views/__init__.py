# api/odontogram/views/__init__.py
"""
Inicializador del módulo views
"""

from .catalogo_views import leyenda, odontologo_por_defecto
from .odontograma_views import OdontogramaViewSet
