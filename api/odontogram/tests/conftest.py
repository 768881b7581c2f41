# api/odontogram/tests/conftest.py
"""
Fixtures compartidas para los tests del odontograma.
"""
import io
from datetime import date

import pytest
from django.contrib.auth import get_user_model
from PIL import Image

from api.patients.models import Paciente
from api.odontogram.models import CondicionDental, Odontograma

User = get_user_model()


def png_bytes(ancho=120, alto=60, color=(200, 30, 30, 255)):
    """PNG en memoria; con alfa para comprobar el aplanado sobre blanco"""
    buffer = io.BytesIO()
    Image.new('RGBA', (ancho, alto), color).save(buffer, format='PNG')
    return buffer.getvalue()


class RenderizadorFalso:
    """Renderizador que devuelve siempre el mismo PNG"""

    def __init__(self, png=None):
        self.png = png or png_bytes()
        self.handles = []

    def capturar(self, handle):
        self.handles.append(handle)
        return self.png


@pytest.fixture
def odontologo_user(db):
    """Usuario odontólogo para tests"""
    return User.objects.create_user(
        username='test_odontologo',
        correo='odontologo@test.com',
        password='testpass123',
        nombres='Juan',
        apellidos='Pérez',
        rol='Odontologo',
        telefono='0999999999',
    )


@pytest.fixture
def otro_odontologo(db):
    return User.objects.create_user(
        username='otro_odontologo',
        correo='otro@test.com',
        password='testpass123',
        nombres='Lucía',
        apellidos='Mora',
        rol='Odontologo',
    )


@pytest.fixture
def paciente(db):
    """Paciente de prueba"""
    return Paciente.objects.create(
        nombres='María',
        apellidos='González',
        cedula_pasaporte='0999999999',
        fecha_nacimiento=date(1990, 5, 15),
        telefono='0999999999',
        correo='maria.gonzalez@test.com',
    )


@pytest.fixture
def odontograma(db, paciente):
    return Odontograma.objects.create(paciente=paciente, nombre='Inicial')


@pytest.fixture
def crear_condicion(odontograma):
    """Fábrica de condiciones persistidas sobre el odontograma de prueba"""

    def _crear(numero_diente=16, tipo_condicion='caries', superficies=None, **kwargs):
        condicion = CondicionDental(
            odontograma=kwargs.pop('odontograma', odontograma),
            numero_diente=numero_diente,
            tipo_condicion=tipo_condicion,
            superficies=superficies or ['oclusal'],
            **kwargs
        )
        condicion.full_clean()
        condicion.save()
        return condicion

    return _crear


@pytest.fixture
def renderizador_falso():
    return RenderizadorFalso()


@pytest.fixture
def api_client():
    """Cliente API"""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, odontologo_user):
    """Cliente API autenticado"""
    api_client.force_authenticate(user=odontologo_user)
    return api_client


@pytest.fixture
def nuevo_renderizador():
    """Fábrica de renderizadores falsos con un PNG a elección"""
    return RenderizadorFalso
