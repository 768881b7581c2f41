# api/odontogram/services/leyenda_service.py
"""Leyenda del odontograma y resumen de condiciones."""
from api.odontogram.constants import (
    CATALOGO_CONDICIONES,
    CODIGOS_SUPERFICIE,
    COLOR_ESTADO,
    CONDICIONES_URGENTES,
    EstadoTratamiento,
    Superficie,
    TipoCondicion,
)

INDICADORES = [
    {'titulo': 'Múltiples condiciones', 'descripcion': 'Número en esquina superior'},
    {'titulo': 'Estado del tratamiento', 'descripcion': 'Punto en esquina inferior'},
]


class LeyendaService:

    @staticmethod
    def leyenda():
        return {
            'condiciones': [
                {
                    'id': valor,
                    'etiqueta': etiqueta,
                    'color': CATALOGO_CONDICIONES[valor]['color'],
                    'glifo': CATALOGO_CONDICIONES[valor]['glifo'],
                }
                for valor, etiqueta in TipoCondicion.choices
            ],
            'estados': [
                {'valor': valor, 'etiqueta': etiqueta, 'color': COLOR_ESTADO[valor]}
                for valor, etiqueta in EstadoTratamiento.choices
            ],
            'superficies': [
                {'valor': valor, 'etiqueta': etiqueta, 'codigo': CODIGOS_SUPERFICIE[valor]}
                for valor, etiqueta in Superficie.choices
            ],
            'indicadores': [dict(i) for i in INDICADORES],
        }

    @staticmethod
    def resumen(condiciones):
        condiciones = list(condiciones)
        completados = sum(1 for c in condiciones if c.estado == EstadoTratamiento.COMPLETADO)
        return {
            'total': len(condiciones),
            'completados': completados,
            'pendientes': len(condiciones) - completados,
            'urgentes': sum(1 for c in condiciones if c.tipo_condicion in CONDICIONES_URGENTES),
        }
