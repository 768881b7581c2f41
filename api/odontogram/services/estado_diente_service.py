# api/odontogram/services/estado_diente_service.py
"""
Estado visual de cada pieza del odontograma.

Regla de la pieza: el color dominante y el punto de estado salen de la
PRIMERA condición registrada (la más antigua), no de la más reciente ni de
la más grave. Cuando hay dos o más condiciones se muestra un contador.
"""
from api.odontogram.constants import (
    CATALOGO_CONDICIONES,
    COLOR_ESTADO,
    CONDICIONES_RANGO,
    FDIConstants,
    SIN_COLOR,
)


def derivar_estado(numero_diente, condiciones):
    """
    Calcula el estado visual de una pieza a partir de sus condiciones
    (en orden de inserción).
    """
    if not condiciones:
        return {
            'numero_diente': numero_diente,
            'color_dominante': SIN_COLOR,
            'glifo': None,
            'tipo_condicion': None,
            'estado': None,
            'color_estado': None,
            'multiplicidad': None,
            'total_condiciones': 0,
            'superficies': [],
        }

    primera = condiciones[0]
    entrada = CATALOGO_CONDICIONES.get(primera.tipo_condicion)
    total = len(condiciones)

    return {
        'numero_diente': numero_diente,
        'color_dominante': entrada['color'] if entrada else SIN_COLOR,
        'glifo': entrada['glifo'] if entrada else None,
        'tipo_condicion': primera.tipo_condicion,
        'estado': primera.estado,
        'color_estado': COLOR_ESTADO.get(primera.estado),
        'multiplicidad': total if total >= 2 else None,
        'total_condiciones': total,
        'superficies': list(primera.superficies or []),
    }


def info_rango(numero_diente, condiciones):
    """
    Posición de la pieza dentro de una condición de rango (puente):
    {'tipo', 'posicion'} con posicion en inicio/medio/fin, o None.
    """
    arcada, indice = FDIConstants.ubicar_en_arcada(numero_diente)
    if arcada is None:
        return None

    for condicion in condiciones:
        if condicion.tipo_condicion not in CONDICIONES_RANGO or condicion.diente_fin_rango is None:
            continue
        arcada_ini, ini = FDIConstants.ubicar_en_arcada(condicion.numero_diente)
        arcada_fin, fin = FDIConstants.ubicar_en_arcada(condicion.diente_fin_rango)
        if arcada_ini != arcada or arcada_fin != arcada:
            continue
        desde, hasta = min(ini, fin), max(ini, fin)
        if not desde <= indice <= hasta:
            continue

        if desde == hasta:
            posicion = 'unico'
        elif indice == desde:
            posicion = 'inicio'
        elif indice == hasta:
            posicion = 'fin'
        else:
            posicion = 'medio'
        return {'tipo': condicion.tipo_condicion, 'posicion': posicion}

    return None


class CeldaDiente:
    """Una pieza del gráfico: deriva su estado y reporta la selección."""

    def __init__(self, numero_diente, condiciones, al_seleccionar=None):
        self.numero_diente = numero_diente
        self.condiciones = list(condiciones)
        self._al_seleccionar = al_seleccionar

    @property
    def estado(self):
        return derivar_estado(self.numero_diente, self.condiciones)

    def seleccionar(self):
        # Selección simple o por rango la decide quien escucha
        if self._al_seleccionar is not None:
            self._al_seleccionar(self.numero_diente)
        return self.numero_diente


class EstadoDienteService:

    @staticmethod
    def estados_odontograma(store):
        """Estado de todas las posiciones de las arcadas, en orden de visualización."""
        todas = store.todas()
        estados = []
        for nombre_arcada, secuencia in FDIConstants.ARCADAS.items():
            for numero in secuencia:
                estado = derivar_estado(numero, store.condiciones_de(numero))
                estado['arcada'] = nombre_arcada
                estado['rango'] = info_rango(numero, todas)
                estados.append(estado)
        return estados

    @staticmethod
    def celdas(store, al_seleccionar=None):
        return {
            numero: CeldaDiente(numero, store.condiciones_de(numero), al_seleccionar)
            for numero in FDIConstants.todas_las_posiciones()
        }
