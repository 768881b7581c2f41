# api/appointment/repositories/__init__.py
from .appointment_repository import CitaRepository

__all__ = [
    'CitaRepository',
]
