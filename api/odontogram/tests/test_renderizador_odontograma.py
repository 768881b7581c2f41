# api/odontogram/tests/test_renderizador_odontograma.py
"""
Tests del gráfico SVG y del renderizador de imágenes para el reporte.
"""
import io
import uuid

import pytest
from django.core.files.base import ContentFile
from PIL import Image

from api.odontogram.exceptions import CapturaImagenError
from api.odontogram.models import CapturaOdontograma, CondicionDental
from api.odontogram.services.condicion_store import CondicionStore
from api.odontogram.services.estado_diente_service import EstadoDienteService
from api.odontogram.services.pdf.odontograma_svg_generator import OdontogramaSVGGenerator
from api.odontogram.services.pdf.renderizador_odontograma import (
    RenderizadorOdontograma,
    handle_odontograma,
)


def estados(*condiciones):
    return EstadoDienteService.estados_odontograma(CondicionStore(list(condiciones)))


class TestOdontogramaSVG:

    def test_incluye_todas_las_piezas(self):
        svg = OdontogramaSVGGenerator.generar_svg(estados())
        assert svg.startswith('<svg')
        for numero in (18, 28, 48, 38, 55, 65, 85, 75):
            assert f'>{numero}</text>' in svg

    def test_color_y_contador_de_la_pieza(self):
        svg = OdontogramaSVGGenerator.generar_svg(estados(
            CondicionDental(numero_diente=16, tipo_condicion='caries', superficies=['oclusal']),
            CondicionDental(numero_diente=16, tipo_condicion='corona', superficies=['completa']),
        ))
        assert 'fill="#EF4444"' in svg
        assert '>2</text>' in svg
        assert 'fill="#1F2937"' in svg

    def test_pieza_completa_muestra_glifo(self):
        svg = OdontogramaSVGGenerator.generar_svg(estados(
            CondicionDental(numero_diente=36, tipo_condicion='extraccion', superficies=['completa']),
        ))
        assert '>X</text>' in svg

    def test_puente_dibuja_barra(self):
        svg = OdontogramaSVGGenerator.generar_svg(estados(
            CondicionDental(numero_diente=12, tipo_condicion='puente', superficies=['completa'],
                            diente_fin_rango=14),
        ))
        assert svg.count('fill="#EC4899"/>') >= 3

    def test_titulo_escapado(self):
        svg = OdontogramaSVGGenerator.generar_svg(estados(), titulo='A & B <1>')
        assert 'A &amp; B &lt;1&gt;' in svg

    def test_rasterizado_con_fondo_blanco(self):
        svg = OdontogramaSVGGenerator.generar_svg(estados())
        png = OdontogramaSVGGenerator.svg_a_png(svg, escala=2)

        with Image.open(io.BytesIO(png)) as img:
            assert img.format == 'PNG'
            rgb = img.convert('RGB')
            assert rgb.getpixel((1, 1)) == (255, 255, 255)
            ancho_1x = float(svg.split('width="', 1)[1].split('"', 1)[0])
            assert img.width == pytest.approx(ancho_1x * 2, abs=2)


@pytest.mark.django_db
class TestRenderizadorOdontograma:

    def test_handle_desconocido(self):
        with pytest.raises(CapturaImagenError):
            RenderizadorOdontograma().capturar('grafico-principal')

    @pytest.mark.parametrize('handle', [None, ''])
    def test_handle_vacio(self, handle):
        with pytest.raises(CapturaImagenError):
            RenderizadorOdontograma().capturar(handle)

    def test_odontograma_inexistente(self):
        with pytest.raises(CapturaImagenError):
            RenderizadorOdontograma().capturar(f'odontograma-{uuid.uuid4()}')

    def test_captura_inexistente(self, odontograma):
        with pytest.raises(CapturaImagenError):
            RenderizadorOdontograma().capturar(f'captura-{odontograma.id}')

    def test_grafico_del_servidor(self, odontograma, crear_condicion):
        crear_condicion(16, 'caries')
        png = RenderizadorOdontograma(escala=1).capturar(handle_odontograma(odontograma))
        with Image.open(io.BytesIO(png)) as img:
            assert img.format == 'PNG'

    def test_fallo_de_rasterizado_se_informa(self, odontograma, monkeypatch):
        def romper(*args, **kwargs):
            raise RuntimeError("backend no disponible")

        monkeypatch.setattr(OdontogramaSVGGenerator, 'svg_a_png', staticmethod(romper))
        with pytest.raises(CapturaImagenError) as exc:
            RenderizadorOdontograma().capturar(handle_odontograma(odontograma))
        assert 'backend no disponible' in exc.value.motivo

    def test_captura_subida_se_aplana_sobre_blanco(self, odontograma, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        buffer = io.BytesIO()
        Image.new('RGBA', (10, 10), (0, 0, 0, 0)).save(buffer, format='PNG')
        CapturaOdontograma.objects.create(
            odontograma=odontograma,
            imagen=ContentFile(buffer.getvalue(), name='captura.png'),
        )

        png = RenderizadorOdontograma().capturar(f'captura-{odontograma.id}')
        with Image.open(io.BytesIO(png)) as img:
            assert img.mode == 'RGB'
            assert img.size == (10, 10)
            assert img.getpixel((5, 5)) == (255, 255, 255)
