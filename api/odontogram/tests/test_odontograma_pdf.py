# api/odontogram/tests/test_odontograma_pdf.py
"""
Tests del reporte PDF del odontograma.
"""
import re
from datetime import date, datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from api.odontogram.exceptions import CapturaImagenError
from api.odontogram.models import CondicionDental, Odontograma
from api.odontogram.services.pdf.odontograma_pdf_generator import (
    MENSAJE_ERROR_IMAGEN,
    OdontogramaPDFGenerator,
    _formatear_costo,
    construir_filas,
    nombre_archivo,
)

FECHA = date(2024, 3, 5)


class GeneradorEspia(OdontogramaPDFGenerator):
    """Registra cada texto dibujado con su posición (mm)"""

    def __init__(self, renderizador):
        super().__init__(renderizador)
        self.textos = []

    def _texto(self, c, x, y, texto, tamano, negrita=False, derecha=False):
        self.textos.append((x, y, texto))
        super()._texto(c, x, y, texto, tamano, negrita=negrita, derecha=derecha)

    def en(self, texto):
        return [(x, y) for x, y, t in self.textos if t == texto]


class RenderizadorRoto:
    def capturar(self, handle):
        raise CapturaImagenError(handle, "elemento no encontrado")


def condicion(numero=14, tipo='caries', superficies=('oclusal',), **kwargs):
    kwargs.setdefault('fecha_creacion', timezone.make_aware(datetime(2024, 3, 1, 10, 0)))
    return CondicionDental(
        numero_diente=numero,
        tipo_condicion=tipo,
        superficies=list(superficies),
        **kwargs
    )


@pytest.fixture
def odontograma_reporte():
    return Odontograma(
        nombre='Inicial',
        fecha_creacion=timezone.make_aware(datetime(2024, 2, 20, 9, 0)),
    )


def paginas(pdf_bytes):
    return len(re.findall(rb'/Type /Page[^s]', pdf_bytes))


class TestFilasDetalle:

    def test_fila_de_caries(self):
        fila = construir_filas([condicion(14, 'caries', costo=Decimal('50'))])[0]
        assert fila['diente'] == '14'
        assert fila['superficies'] == 'O'
        assert fila['diagnostico'] == 'Caries'
        assert fila['importe'] == '$50'
        assert fila['fecha'] == '01/03/2024'
        assert fila['notas'] == '-'

    def test_rango_de_piezas(self):
        fila = construir_filas([condicion(11, 'puente', diente_fin_rango=13)])[0]
        assert fila['diente'] == '11-13'

    def test_notas_recortadas_a_30_caracteres(self):
        notas = 'x' * 40
        fila = construir_filas([condicion(notas=notas)])[0]
        assert fila['notas'] == 'x' * 30

    def test_varias_superficies_separadas_por_coma(self):
        fila = construir_filas([condicion(superficies=['oclusal', 'mesial', 'distal'])])[0]
        assert fila['superficies'] == 'O,M,D'

    def test_valores_fuera_del_catalogo_se_muestran_tal_cual(self):
        fila = construir_filas([condicion(tipo='abrasion', superficies=['raiz'])])[0]
        assert fila['diagnostico'] == 'abrasion'
        assert fila['superficies'] == 'raiz'

    def test_sin_fecha(self):
        fila = construir_filas([condicion(fecha_creacion=None)])[0]
        assert fila['fecha'] == '-'

    @pytest.mark.parametrize('costo, esperado', [
        (None, '$0'),
        (0, '$0'),
        (Decimal('0.00'), '$0'),
        (Decimal('50.00'), '$50'),
        (Decimal('80.50'), '$80.5'),
        (Decimal('100'), '$100'),
        (1200, '$1200'),
    ])
    def test_formato_de_importe(self, costo, esperado):
        assert _formatear_costo(costo) == esperado


class TestNombreArchivo:

    def test_convencion(self):
        assert nombre_archivo('Ana Pérez', FECHA) == 'Odontograma_Ana Pérez_05/03/2024.pdf'

    def test_sin_nombre(self):
        assert nombre_archivo(None, FECHA) == 'Odontograma__05/03/2024.pdf'


class TestGeneradorPDF:

    def test_genera_pdf_con_imagen_y_detalle(self, odontograma_reporte, nuevo_renderizador, settings):
        settings.ODONTOGRAMA = {**settings.ODONTOGRAMA, 'NOMBRE_CLINICA': ''}
        renderizador = nuevo_renderizador()
        generador = GeneradorEspia(renderizador)

        pdf = generador.generar(
            odontograma_reporte,
            [condicion(14, 'caries', costo=50)],
            nombre_paciente='Ana Pérez',
            email_paciente='ana@test.com',
            telefono_paciente='0999999999',
            handle='odontograma-1',
            fecha_generacion=FECHA,
        )

        assert pdf.startswith(b'%PDF')
        assert renderizador.handles == ['odontograma-1']
        assert generador.en('Clínica Dental') == [(14, 20)]
        [(x, y)] = generador.en('Fecha de Generación: 05/03/2024')
        assert y == 20 and x == pytest.approx(196)
        assert generador.en('Información del Paciente') == [(14, 35)]
        assert generador.en('Nombre: Ana Pérez') == [(14, 42)]
        assert generador.en('Email: ana@test.com') == [(14, 47)]
        assert generador.en('Teléfono: 0999999999') == [(14, 52)]
        assert generador.en('Odontograma: Inicial') == [(100, 42)]
        assert generador.en('Fecha Creación: 20/02/2024') == [(100, 47)]
        assert generador.en(MENSAJE_ERROR_IMAGEN) == []
        for texto in ('14', 'O', 'Caries', '$50'):
            assert generador.en(texto), texto

    def test_sin_email_ni_telefono(self, odontograma_reporte, nuevo_renderizador):
        generador = GeneradorEspia(nuevo_renderizador())
        generador.generar(odontograma_reporte, [], nombre_paciente='Ana', fecha_generacion=FECHA)
        textos = [t for _, _, t in generador.textos]
        assert not any(t.startswith('Email:') for t in textos)
        assert not any(t.startswith('Teléfono:') for t in textos)

    def test_imagen_no_disponible_usa_texto_alternativo(self, odontograma_reporte, nuevo_renderizador):
        generador = GeneradorEspia(RenderizadorRoto())

        pdf = generador.generar(
            odontograma_reporte,
            [condicion(14), condicion(21, 'corona')],
            nombre_paciente='Ana',
            handle='odontograma-inexistente',
            fecha_generacion=FECHA,
        )

        assert pdf.startswith(b'%PDF')
        assert generador.en(MENSAJE_ERROR_IMAGEN) == [(14, 60)]
        assert generador.en('Detalle de Diagnósticos') == [(14, 70)]
        assert generador.en('Corona')

    def test_imagen_corrupta_usa_texto_alternativo(self, odontograma_reporte, nuevo_renderizador):
        generador = GeneradorEspia(nuevo_renderizador(png=b'no es png'))
        generador.generar(odontograma_reporte, [], fecha_generacion=FECHA)
        assert generador.en(MENSAJE_ERROR_IMAGEN) == [(14, 60)]

    def test_cabecera_de_tabla(self, odontograma_reporte, nuevo_renderizador):
        generador = GeneradorEspia(RenderizadorRoto())
        generador.generar(odontograma_reporte, [], fecha_generacion=FECHA)

        for etiqueta, x in [('Fecha', 16), ('Diente', 45), ('Sup.', 65),
                            ('Diagnóstico', 85), ('Notas', 135)]:
            assert generador.en(etiqueta) == [(x, 80)]
        assert [y for _, y in generador.en('Importe')] == [80]

    def test_sin_condiciones_no_es_error(self, odontograma_reporte, nuevo_renderizador):
        pdf = OdontogramaPDFGenerator(nuevo_renderizador()).generar(
            odontograma_reporte, [], fecha_generacion=FECHA
        )
        assert pdf.startswith(b'%PDF')
        assert paginas(pdf) == 1

    def test_odontograma_nulo(self, nuevo_renderizador):
        with pytest.raises(ValueError):
            OdontogramaPDFGenerator(nuevo_renderizador()).generar(None, [])

    def test_salto_de_pagina_sin_repetir_cabecera(self, odontograma_reporte, nuevo_renderizador):
        # Imagen 120x60 -> 91 mm de alto: la primera fila queda en y=179
        # y caben 13 filas antes de superar 280 mm.
        generador = GeneradorEspia(nuevo_renderizador())
        condiciones = [condicion(notas=f'fila {i}') for i in range(14)]

        pdf = generador.generar(odontograma_reporte, condiciones, fecha_generacion=FECHA)

        assert paginas(pdf) == 2
        assert generador.en('fila 13') == [(135, 20)]
        assert len(generador.en('Diente')) == 1

    def test_trece_filas_caben_en_una_pagina(self, odontograma_reporte, nuevo_renderizador):
        condiciones = [condicion() for _ in range(13)]
        pdf = OdontogramaPDFGenerator(nuevo_renderizador()).generar(
            odontograma_reporte, condiciones, fecha_generacion=FECHA
        )
        assert paginas(pdf) == 1

    def test_mismas_entradas_mismo_pdf(self, odontograma_reporte, nuevo_renderizador):
        condiciones = [condicion(14, costo=50), condicion(11, 'puente', diente_fin_rango=13)]
        generador = OdontogramaPDFGenerator(nuevo_renderizador())

        primero = generador.generar(odontograma_reporte, condiciones, nombre_paciente='Ana',
                                    fecha_generacion=FECHA)
        segundo = generador.generar(odontograma_reporte, condiciones, nombre_paciente='Ana',
                                    fecha_generacion=FECHA)
        assert primero == segundo
