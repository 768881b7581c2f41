# api/odontogram/constants.py

"""
Catálogo del odontograma: numeración FDI, arcadas, condiciones,
estados de tratamiento y superficies.
"""
from datetime import date, datetime

from django.db import models
from django.utils import timezone


class FDIConstants:
    """Gestión centralizada de códigos FDI"""

    CUADRANTES = {
        1: {'arcada': 'SUPERIOR', 'lado': 'DERECHO', 'denticion': 'permanente'},
        2: {'arcada': 'SUPERIOR', 'lado': 'IZQUIERDO', 'denticion': 'permanente'},
        3: {'arcada': 'INFERIOR', 'lado': 'IZQUIERDO', 'denticion': 'permanente'},
        4: {'arcada': 'INFERIOR', 'lado': 'DERECHO', 'denticion': 'permanente'},
        5: {'arcada': 'SUPERIOR', 'lado': 'DERECHO', 'denticion': 'temporal'},
        6: {'arcada': 'SUPERIOR', 'lado': 'IZQUIERDO', 'denticion': 'temporal'},
        7: {'arcada': 'INFERIOR', 'lado': 'IZQUIERDO', 'denticion': 'temporal'},
        8: {'arcada': 'INFERIOR', 'lado': 'DERECHO', 'denticion': 'temporal'},
    }

    POSICIONES_EN_CUADRANTE = {
        'permanente': {
            1: 'Incisivo central',
            2: 'Incisivo lateral',
            3: 'Canino',
            4: 'Primer premolar',
            5: 'Segundo premolar',
            6: 'Primer molar',
            7: 'Segundo molar',
            8: 'Tercer molar',
        },
        'temporal': {
            1: 'Incisivo central',
            2: 'Incisivo lateral',
            3: 'Canino',
            4: 'Primer molar',
            5: 'Segundo molar',
        }
    }

    # Orden de visualización de izquierda a derecha en cada fila del gráfico
    ARCADAS = {
        'superior_permanente': [18, 17, 16, 15, 14, 13, 12, 11, 21, 22, 23, 24, 25, 26, 27, 28],
        'inferior_permanente': [48, 47, 46, 45, 44, 43, 42, 41, 31, 32, 33, 34, 35, 36, 37, 38],
        'superior_temporal': [55, 54, 53, 52, 51, 61, 62, 63, 64, 65],
        'inferior_temporal': [85, 84, 83, 82, 81, 71, 72, 73, 74, 75],
    }

    @classmethod
    def obtener_info_fdi(cls, codigo_fdi):
        """
        Extrae información del código FDI
        Retorna: {cuadrante, posicion, arcada, lado, denticion, nombre} o None
        """
        codigo_fdi = str(codigo_fdi) if codigo_fdi is not None else ''
        if len(codigo_fdi) != 2 or not codigo_fdi.isdigit():
            return None

        cuadrante = int(codigo_fdi[0])
        posicion = int(codigo_fdi[1])

        if cuadrante not in cls.CUADRANTES:
            return None

        info_cuad = cls.CUADRANTES[cuadrante]
        denticion = info_cuad['denticion']

        if posicion not in cls.POSICIONES_EN_CUADRANTE[denticion]:
            return None

        return {
            'codigo_fdi': codigo_fdi,
            'cuadrante': cuadrante,
            'posicion': posicion,
            'arcada': info_cuad['arcada'],
            'lado': info_cuad['lado'],
            'denticion': denticion,
            'nombre': cls.POSICIONES_EN_CUADRANTE[denticion][posicion],
        }

    @classmethod
    def es_posicion_valida(cls, numero):
        if isinstance(numero, bool):
            return False
        return cls.obtener_info_fdi(numero) is not None

    @classmethod
    def ubicar_en_arcada(cls, numero):
        """(nombre_arcada, índice) dentro de la secuencia de la arcada, o (None, None)"""
        for nombre, secuencia in cls.ARCADAS.items():
            if numero in secuencia:
                return nombre, secuencia.index(numero)
        return None, None

    @classmethod
    def todas_las_posiciones(cls):
        return [n for secuencia in cls.ARCADAS.values() for n in secuencia]


# ── Condiciones ─────────────────────────────────────────────────────────────

class TipoCondicion(models.TextChoices):
    CARIES = 'caries', 'Caries'
    RESTAURACION = 'restauracion', 'Restauración'
    CORONA = 'corona', 'Corona'
    ENDODONCIA = 'endodoncia', 'Endodoncia'
    EXTRACCION = 'extraccion', 'Extracción/Ausente'
    IMPLANTE = 'implante', 'Implante'
    FRACTURA = 'fractura', 'Fractura'
    PUENTE = 'puente', 'Puente'
    CARILLA = 'carilla', 'Carilla'
    INFECCION_APICAL = 'infeccion_apical', 'Infección Apical'
    RECONSTRUCCION_DEFECTUOSA = 'reconstruccion_defectuosa', 'Reconstrucción Defectuosa'


# id -> {color, glifo}
CATALOGO_CONDICIONES = {
    TipoCondicion.CARIES: {'color': '#EF4444', 'glifo': 'C'},
    TipoCondicion.RESTAURACION: {'color': '#3B82F6', 'glifo': 'R'},
    TipoCondicion.CORONA: {'color': '#F59E0B', 'glifo': 'K'},
    TipoCondicion.ENDODONCIA: {'color': '#8B5CF6', 'glifo': 'E'},
    TipoCondicion.EXTRACCION: {'color': '#6B7280', 'glifo': 'X'},
    TipoCondicion.IMPLANTE: {'color': '#10B981', 'glifo': 'I'},
    TipoCondicion.FRACTURA: {'color': '#F97316', 'glifo': 'F'},
    TipoCondicion.PUENTE: {'color': '#EC4899', 'glifo': 'P'},
    TipoCondicion.CARILLA: {'color': '#06B6D4', 'glifo': 'V'},
    TipoCondicion.INFECCION_APICAL: {'color': '#DC2626', 'glifo': 'A'},
    TipoCondicion.RECONSTRUCCION_DEFECTUOSA: {'color': '#7C2D12', 'glifo': 'D'},
}

CONDICIONES_URGENTES = frozenset({
    TipoCondicion.CARIES,
    TipoCondicion.INFECCION_APICAL,
    TipoCondicion.FRACTURA,
})

# Condiciones que abarcan varias piezas
CONDICIONES_RANGO = frozenset({TipoCondicion.PUENTE})

SIN_COLOR = 'none'


# ── Estados de tratamiento ──────────────────────────────────────────────────

class EstadoTratamiento(models.TextChoices):
    PLANIFICADO = 'planificado', 'Planificado'
    EN_PROCESO = 'en_proceso', 'En proceso'
    COMPLETADO = 'completado', 'Completado'


COLOR_ESTADO = {
    EstadoTratamiento.PLANIFICADO: '#3B82F6',
    EstadoTratamiento.EN_PROCESO: '#EAB308',
    EstadoTratamiento.COMPLETADO: '#10B981',
}


# ── Superficies ─────────────────────────────────────────────────────────────

class Superficie(models.TextChoices):
    """El orden de declaración es el orden canónico"""
    OCLUSAL = 'oclusal', 'Oclusal'
    VESTIBULAR = 'vestibular', 'Vestibular'
    LINGUAL = 'lingual', 'Lingual'
    MESIAL = 'mesial', 'Mesial'
    DISTAL = 'distal', 'Distal'
    INCISAL = 'incisal', 'Incisal'
    CERVICAL = 'cervical', 'Cervical'
    COMPLETA = 'completa', 'Completa'


CODIGOS_SUPERFICIE = {
    Superficie.OCLUSAL: 'O',
    Superficie.VESTIBULAR: 'V',
    Superficie.LINGUAL: 'L',
    Superficie.MESIAL: 'M',
    Superficie.DISTAL: 'D',
    Superficie.INCISAL: 'I',
    Superficie.CERVICAL: 'C',
    Superficie.COMPLETA: 'T',
}

ORDEN_SUPERFICIES = {valor: i for i, valor in enumerate(Superficie.values)}


def normalizar_superficies(superficies):
    """Colapsa duplicados y ordena según el orden canónico; lo desconocido va al final."""
    unicas = dict.fromkeys(str(s) for s in (superficies or []))
    return sorted(unicas, key=lambda s: ORDEN_SUPERFICIES.get(s, len(ORDEN_SUPERFICIES)))


# ── Fechas ──────────────────────────────────────────────────────────────────

FORMATO_FECHA = '%d/%m/%Y'


def formatear_fecha(valor):
    """DD/MM/YYYY; las fechas con zona horaria se muestran en hora local."""
    if not valor:
        return '-'
    if isinstance(valor, datetime):
        if timezone.is_aware(valor):
            valor = timezone.localtime(valor)
        return valor.strftime(FORMATO_FECHA)
    if isinstance(valor, date):
        return valor.strftime(FORMATO_FECHA)
    return str(valor)
