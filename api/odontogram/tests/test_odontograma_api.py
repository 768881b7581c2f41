# api/odontogram/tests/test_odontograma_api.py
"""
Tests de los endpoints REST del odontograma.
"""
import io
import uuid
from datetime import time, timedelta
from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone
from PIL import Image
from rest_framework import status

from api.appointment.models import Cita
from api.odontogram.exceptions import PersistenciaError
from api.odontogram.models import CondicionDental, Odontograma
from api.odontogram.repositories.odontogram_repositories import CondicionDentalRepository
from api.odontogram.services.captura_diagnostico import MENSAJE_ERROR_GUARDADO, MENSAJE_GUARDADO_OK


def url_condiciones(odontograma):
    return reverse('odontogram:odontograma-condiciones', args=[odontograma.id])


@pytest.mark.django_db
class TestOdontogramasEndpoint:

    def test_requiere_autenticacion(self, api_client):
        response = api_client.get(reverse('odontogram:odontograma-list'))
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_listar_por_paciente(self, authenticated_client, odontograma):
        response = authenticated_client.get(
            reverse('odontogram:odontograma-list'), {'paciente': str(odontograma.paciente_id)}
        )
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert [o['id'] for o in body['data']] == [str(odontograma.id)]

    def test_crear_version(self, authenticated_client, paciente, odontograma, crear_condicion):
        crear_condicion(16)
        response = authenticated_client.post(
            reverse('odontogram:odontograma-list'),
            {'paciente': str(paciente.id), 'nombre': 'Control'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body['message'] == 'Odontograma creado correctamente'
        assert body['data']['tipo'] == 'evolucion'
        assert body['data']['total_condiciones'] == 1


    def test_version_actual(self, authenticated_client, paciente, odontograma):
        posterior = Odontograma.objects.create(
            paciente=paciente, nombre='Control', fecha=odontograma.fecha + timedelta(days=7),
        )
        url = reverse('odontogram:odontograma-actual')

        response = authenticated_client.get(url, {'paciente': str(paciente.id)})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['data']['id'] == str(posterior.id)

        response = authenticated_client.get(
            url, {'paciente': str(paciente.id), 'odontograma': str(odontograma.id)}
        )
        assert response.json()['data']['id'] == str(odontograma.id)

    def test_version_actual_requiere_paciente(self, authenticated_client):
        response = authenticated_client.get(reverse('odontogram:odontograma-actual'))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'paciente' in response.json()['errors']

    def test_version_actual_sin_odontogramas(self, authenticated_client, paciente):
        response = authenticated_client.get(
            reverse('odontogram:odontograma-actual'), {'paciente': str(paciente.id)}
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCondicionesEndpoint:

    def test_registrar_diagnostico(self, authenticated_client, odontograma, odontologo_user):
        response = authenticated_client.post(
            url_condiciones(odontograma),
            {
                'numero_diente': 14,
                'superficies': ['oclusal'],
                'tipo_condicion': 'caries',
                'estado': 'planificado',
                'costo': '50',
                'odontologo': str(odontologo_user.id),
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body['data']['descriptor_diente'] == '14'
        assert body['data']['codigos_superficie'] == 'O'
        assert body['data']['etiqueta'] == 'Caries'
        assert body['notificaciones'][0]['tipo'] == 'success'
        assert body['notificaciones'][0]['mensaje'] == MENSAJE_GUARDADO_OK

        condicion = CondicionDental.objects.get()
        assert condicion.odontologo == odontologo_user
        assert condicion.ip_creacion == '127.0.0.1'

    def test_odontologo_de_la_proxima_cita(self, authenticated_client, odontograma, otro_odontologo):
        Cita.objects.create(
            paciente=odontograma.paciente, odontologo=otro_odontologo,
            fecha=timezone.localdate() + timedelta(days=2), hora_inicio=time(9, 0),
        )
        response = authenticated_client.post(
            url_condiciones(odontograma),
            {'numero_diente': 36, 'superficies': ['completa'], 'tipo_condicion': 'extraccion'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert CondicionDental.objects.get().odontologo == otro_odontologo

    def test_sin_superficies(self, authenticated_client, odontograma):
        response = authenticated_client.post(
            url_condiciones(odontograma),
            {'numero_diente': 14, 'superficies': [], 'tipo_condicion': 'caries'},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body['success'] is False
        assert 'superficies' in body['errors']
        assert not CondicionDental.objects.exists()

    def test_rango_invalido(self, authenticated_client, odontograma):
        response = authenticated_client.post(
            url_condiciones(odontograma),
            {'numero_diente': 15, 'diente_fin_rango': 13, 'superficies': ['completa'],
             'tipo_condicion': 'puente'},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'diente_fin_rango' in response.json()['errors']

    def test_registrar_puente(self, authenticated_client, odontograma):
        response = authenticated_client.post(
            url_condiciones(odontograma),
            {'numero_diente': 11, 'diente_fin_rango': 13, 'superficies': ['completa'],
             'tipo_condicion': 'puente'},
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['descriptor_diente'] == '11-13'
        assert CondicionDental.objects.get().diente_fin_rango == 13

    def test_fallo_de_persistencia(self, authenticated_client, odontograma):
        with patch.object(
            CondicionDentalRepository, 'guardar_condicion',
            side_effect=PersistenciaError("sin conexión"),
        ):
            response = authenticated_client.post(
                url_condiciones(odontograma),
                {'numero_diente': 14, 'superficies': ['oclusal'], 'tipo_condicion': 'caries',
                 'notas': 'revisar'},
                format='json',
            )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        body = response.json()
        assert body['message'] == MENSAJE_ERROR_GUARDADO
        assert body['notificaciones'][0]['tipo'] == 'error'
        assert body['errors']['datos']['notas'] == 'revisar'
        assert body['errors']['datos']['estado_flujo'] == 'abierto'
        assert not CondicionDental.objects.exists()

    def test_listar_en_orden_de_registro(self, authenticated_client, odontograma, crear_condicion):
        primera = crear_condicion(16, 'caries')
        segunda = crear_condicion(11, 'corona', superficies=['completa'])
        response = authenticated_client.get(url_condiciones(odontograma))
        assert response.status_code == status.HTTP_200_OK
        assert [c['id'] for c in response.json()['data']] == [primera.id, segunda.id]


@pytest.mark.django_db
class TestEstadoYResumen:

    def test_dientes(self, authenticated_client, odontograma, crear_condicion):
        crear_condicion(16, 'caries')
        crear_condicion(16, 'restauracion')
        response = authenticated_client.get(
            reverse('odontogram:odontograma-dientes', args=[odontograma.id])
        )
        assert response.status_code == status.HTTP_200_OK
        estados = {e['numero_diente']: e for e in response.json()['data']}
        assert len(estados) == 52
        assert estados[16]['color_dominante'] == '#EF4444'
        assert estados[16]['multiplicidad'] == 2

    def test_resumen(self, authenticated_client, odontograma, crear_condicion):
        crear_condicion(16, 'caries')
        crear_condicion(21, 'corona', estado='completado')
        response = authenticated_client.get(
            reverse('odontogram:odontograma-resumen', args=[odontograma.id])
        )
        assert response.json()['data'] == {
            'total': 2, 'completados': 1, 'pendientes': 1, 'urgentes': 1,
        }

    def test_leyenda(self, authenticated_client):
        response = authenticated_client.get(reverse('odontogram:leyenda'))
        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()['data']['condiciones']) == 11

    def test_odontologo_por_defecto(self, authenticated_client, paciente, odontologo_user):
        Cita.objects.create(
            paciente=paciente, odontologo=odontologo_user,
            fecha=timezone.localdate(), hora_inicio=time(8, 0),
        )
        response = authenticated_client.get(
            reverse('odontogram:odontologo-por-defecto', args=[paciente.id])
        )
        assert response.json()['data']['odontologo_id'] == str(odontologo_user.id)

    def test_sin_odontologo_por_defecto(self, authenticated_client, paciente):
        response = authenticated_client.get(
            reverse('odontogram:odontologo-por-defecto', args=[paciente.id])
        )
        assert response.json()['data']['odontologo'] is None


@pytest.mark.django_db
class TestCapturaYPDF:

    def _png(self):
        buffer = io.BytesIO()
        Image.new('RGB', (40, 20), (255, 0, 0)).save(buffer, format='PNG')
        return SimpleUploadedFile('grafico.png', buffer.getvalue(), content_type='image/png')

    def test_subir_captura(self, authenticated_client, odontograma, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        response = authenticated_client.post(
            reverse('odontogram:odontograma-captura', args=[odontograma.id]),
            {'imagen': self._png()},
            format='multipart',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()['data']['handle'] == f'captura-{odontograma.id}'

    def test_descargar_pdf(self, authenticated_client, odontograma, crear_condicion, nuevo_renderizador):
        crear_condicion(14, 'caries', costo=50)
        with patch(
            'api.odontogram.views.odontograma_views.RenderizadorOdontograma',
            return_value=nuevo_renderizador(),
        ):
            response = authenticated_client.get(
                reverse('odontogram:odontograma-pdf', args=[odontograma.id])
            )

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/pdf'
        assert response.content.startswith(b'%PDF')
        fecha = timezone.localdate().strftime('%d/%m/%Y')
        assert response['Content-Disposition'] == (
            f'attachment; filename="Odontograma_María González_{fecha}.pdf"'
        )

    def test_pdf_con_grafico_del_servidor(self, authenticated_client, odontograma, crear_condicion):
        crear_condicion(11, 'puente', superficies=['completa'], diente_fin_rango=13)
        response = authenticated_client.get(
            reverse('odontogram:odontograma-pdf', args=[odontograma.id])
        )

        assert response.status_code == status.HTTP_200_OK
        assert b'/Subtype /Image' in response.content

    def test_pdf_de_odontograma_inexistente(self, authenticated_client):
        response = authenticated_client.get(
            reverse('odontogram:odontograma-pdf', args=[uuid.uuid4()])
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
