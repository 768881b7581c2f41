# api/odontogram/validators/validator_fdi.py
from django.core.exceptions import ValidationError

from api.odontogram.constants import FDIConstants, Superficie


def validar_numero_diente(numero):
    """Valida que el número corresponda a una posición FDI (11-48, 51-85)"""
    if not FDIConstants.es_posicion_valida(numero):
        raise ValidationError(f"'{numero}' no es una posición dental FDI válida")


def validar_rango(numero_diente, diente_fin_rango):
    """El fin del rango debe ser una pieza de número mayor en la misma fila del gráfico"""
    if diente_fin_rango is None:
        return

    arcada_inicio, _ = FDIConstants.ubicar_en_arcada(numero_diente)
    arcada_fin, _ = FDIConstants.ubicar_en_arcada(diente_fin_rango)

    if arcada_fin is None:
        raise ValidationError(f"'{diente_fin_rango}' no es una posición dental FDI válida")
    if arcada_inicio != arcada_fin:
        raise ValidationError("El rango debe estar dentro de una misma arcada")
    if diente_fin_rango <= numero_diente:
        raise ValidationError(
            f"La pieza final del rango ({diente_fin_rango}) debe ser mayor que {numero_diente}"
        )


def validar_superficies(superficies):
    """Lista no vacía de superficies conocidas"""
    if not superficies:
        raise ValidationError("Selecciona al menos una superficie")
    desconocidas = [s for s in superficies if s not in Superficie.values]
    if desconocidas:
        raise ValidationError(f"Superficies no reconocidas: {', '.join(map(str, desconocidas))}")
