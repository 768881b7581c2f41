# api/odontogram/tests/test_estado_diente.py
"""
Tests del estado visual derivado de cada pieza.
"""
import pytest

from api.odontogram.constants import CATALOGO_CONDICIONES, COLOR_ESTADO, FDIConstants, SIN_COLOR
from api.odontogram.models import CondicionDental
from api.odontogram.services.condicion_store import CondicionStore
from api.odontogram.services.estado_diente_service import (
    CeldaDiente,
    EstadoDienteService,
    derivar_estado,
    info_rango,
)


def condicion(numero=16, tipo='caries', estado='planificado', superficies=('oclusal',), **kwargs):
    return CondicionDental(
        numero_diente=numero,
        tipo_condicion=tipo,
        estado=estado,
        superficies=list(superficies),
        **kwargs
    )


class TestDerivarEstado:

    def test_pieza_sin_condiciones(self):
        estado = derivar_estado(16, [])
        assert estado['color_dominante'] == SIN_COLOR
        assert estado['glifo'] is None
        assert estado['color_estado'] is None
        assert estado['multiplicidad'] is None
        assert estado['total_condiciones'] == 0

    def test_una_condicion_sin_contador(self):
        estado = derivar_estado(16, [condicion(tipo='corona', estado='en_proceso')])
        assert estado['color_dominante'] == '#F59E0B'
        assert estado['glifo'] == 'K'
        assert estado['color_estado'] == '#EAB308'
        assert estado['multiplicidad'] is None

    def test_la_primera_condicion_define_el_color(self):
        condiciones = [
            condicion(tipo='caries', estado='planificado'),
            condicion(tipo='restauracion', estado='completado'),
        ]
        estado = derivar_estado(16, condiciones)
        assert estado['color_dominante'] == '#EF4444'
        assert estado['color_estado'] == COLOR_ESTADO['planificado']
        assert estado['multiplicidad'] == 2

    @pytest.mark.parametrize('cantidad', [2, 3, 7])
    def test_contador_igual_al_numero_de_condiciones(self, cantidad):
        tipos = list(CATALOGO_CONDICIONES)
        condiciones = [condicion(tipo=tipos[i % len(tipos)]) for i in range(cantidad)]
        assert derivar_estado(16, condiciones)['multiplicidad'] == cantidad

    def test_tipo_fuera_del_catalogo_no_tiene_color(self):
        estado = derivar_estado(16, [condicion(tipo='desconocido')])
        assert estado['color_dominante'] == SIN_COLOR
        assert estado['tipo_condicion'] == 'desconocido'

    def test_superficies_de_la_primera_condicion(self):
        estado = derivar_estado(16, [
            condicion(superficies=['mesial', 'oclusal']),
            condicion(superficies=['completa']),
        ])
        assert estado['superficies'] == ['mesial', 'oclusal']


class TestInfoRango:

    def test_posiciones_del_puente(self):
        puente = condicion(11, 'puente', diente_fin_rango=14)
        assert info_rango(14, [puente]) == {'tipo': 'puente', 'posicion': 'inicio'}
        assert info_rango(13, [puente]) == {'tipo': 'puente', 'posicion': 'medio'}
        assert info_rango(11, [puente]) == {'tipo': 'puente', 'posicion': 'fin'}
        assert info_rango(21, [puente]) is None
        assert info_rango(15, [puente]) is None

    def test_condiciones_sin_rango_se_ignoran(self):
        assert info_rango(16, [condicion(16, 'caries')]) is None


class TestCeldaDiente:

    def test_seleccionar_notifica_el_numero(self):
        seleccionados = []
        celda = CeldaDiente(36, [], al_seleccionar=seleccionados.append)
        assert celda.seleccionar() == 36
        assert seleccionados == [36]

    def test_estado_se_recalcula_con_las_condiciones(self):
        celda = CeldaDiente(36, [condicion(36, 'endodoncia')])
        assert celda.estado['glifo'] == 'E'


class TestEstadoDienteService:

    def test_cubre_todas_las_posiciones(self):
        store = CondicionStore([condicion(16), condicion(16, 'corona'), condicion(75, 'extraccion')])
        estados = EstadoDienteService.estados_odontograma(store)

        numeros = [e['numero_diente'] for e in estados]
        assert numeros == FDIConstants.todas_las_posiciones()
        assert len(numeros) == 52

        por_numero = {e['numero_diente']: e for e in estados}
        assert por_numero[16]['multiplicidad'] == 2
        assert por_numero[75]['glifo'] == 'X'
        assert por_numero[75]['arcada'] == 'inferior_temporal'
        assert por_numero[11]['color_dominante'] == SIN_COLOR

    def test_celdas_por_posicion(self):
        store = CondicionStore([condicion(21)])
        celdas = EstadoDienteService.celdas(store)
        assert len(celdas) == 52
        assert celdas[21].estado['total_condiciones'] == 1
