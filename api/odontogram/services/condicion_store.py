# api/odontogram/services/condicion_store.py
"""
Colección en memoria de las condiciones de un odontograma abierto.

Mantiene el orden de inserción tanto global como por pieza. Una sesión de
gráfico es dueña exclusiva de su store; no hay coordinación entre sesiones.
"""
import logging
from collections import defaultdict

from django.core.exceptions import ValidationError

from api.odontogram.constants import FDIConstants
from api.odontogram.validators.validator_fdi import validar_rango

logger = logging.getLogger(__name__)


class CondicionStore:

    def __init__(self, condiciones=None):
        self._condiciones = []
        self._por_diente = defaultdict(list)
        for condicion in condiciones or []:
            self.agregar(condicion)

    @classmethod
    def desde_odontograma(cls, odontograma):
        """Carga las condiciones activas persistidas, en orden de inserción."""
        condiciones = odontograma.condiciones.filter(activo=True).order_by('id')
        return cls(condiciones)

    def agregar(self, condicion):
        errores = {}
        if not condicion.superficies:
            errores['superficies'] = ["Selecciona al menos una superficie"]
        if not FDIConstants.es_posicion_valida(condicion.numero_diente):
            errores['numero_diente'] = [
                f"'{condicion.numero_diente}' no es una posición dental FDI válida"
            ]
        elif condicion.diente_fin_rango is not None:
            try:
                validar_rango(condicion.numero_diente, condicion.diente_fin_rango)
            except ValidationError as e:
                errores['diente_fin_rango'] = e.messages
        if errores:
            raise ValidationError(errores)

        self._condiciones.append(condicion)
        self._por_diente[condicion.numero_diente].append(condicion)
        logger.debug(
            f"Condición {condicion.tipo_condicion} agregada a la pieza {condicion.numero_diente}"
        )

    def condiciones_de(self, numero_diente):
        return list(self._por_diente.get(numero_diente, ()))

    def todas(self):
        return list(self._condiciones)

    def numeros_con_condiciones(self):
        return [n for n, lista in self._por_diente.items() if lista]

    def ultima_de(self, numero_diente):
        lista = self._por_diente.get(numero_diente)
        return lista[-1] if lista else None

    def __len__(self):
        return len(self._condiciones)

    def __iter__(self):
        return iter(self.todas())
