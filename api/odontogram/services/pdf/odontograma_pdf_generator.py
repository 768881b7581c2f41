# api/odontogram/services/pdf/odontograma_pdf_generator.py
"""
Reporte PDF del odontograma: datos del paciente, imagen del gráfico y
detalle de diagnósticos con su importe.

USO BÁSICO:
    generador = OdontogramaPDFGenerator(RenderizadorOdontograma())
    pdf_bytes = generador.generar(
        odontograma,
        condiciones,
        nombre_paciente='Ana Pérez',
        handle=handle_odontograma(odontograma),
    )
    nombre = nombre_archivo('Ana Pérez', fecha)

Todas las coordenadas están en milímetros medidos desde la esquina superior
izquierda de una hoja A4 vertical.
"""
import io
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.conf import settings
from django.utils import timezone
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from api.odontogram.constants import formatear_fecha
from api.odontogram.exceptions import CapturaImagenError

logger = logging.getLogger(__name__)

NOMBRE_CLINICA_POR_DEFECTO = 'Clínica Dental'
MENSAJE_ERROR_IMAGEN = '(Error al capturar la imagen del odontograma)'

# ── Layout (mm) ───────────────────────────────────────────────────────────
MARGEN = 14
Y_IMAGEN = 60
Y_LIMITE_PAGINA = 280
Y_INICIO_PAGINA = 20
ALTO_FILA = 8
LARGO_NOTAS = 30
GRIS_CABECERA = (240 / 255, 240 / 255, 240 / 255)

# (etiqueta, x) de las columnas alineadas a la izquierda
COLUMNAS = [
    ('Fecha', 16),
    ('Diente', 45),
    ('Sup.', 65),
    ('Diagnóstico', 85),
    ('Notas', 135),
]
ETIQUETA_IMPORTE = 'Importe'


def _formatear_costo(costo) -> str:
    if costo in (None, ''):
        return '$0'
    try:
        valor = Decimal(str(costo))
    except InvalidOperation:
        return '$0'
    if not valor:
        return '$0'
    return f"${format(valor.normalize(), 'f')}"


def construir_filas(condiciones) -> List[dict]:
    """Textos de cada fila del detalle, en el orden recibido."""
    filas = []
    for c in condiciones:
        notas = c.notas or ''
        filas.append({
            'fecha': formatear_fecha(c.fecha_creacion),
            'diente': c.descriptor_diente,
            'superficies': c.codigos_superficie,
            'diagnostico': c.etiqueta,
            'notas': notas[:LARGO_NOTAS] if notas else '-',
            'importe': _formatear_costo(c.costo),
        })
    return filas


def nombre_archivo(nombre_paciente: Optional[str], fecha: Optional[date] = None) -> str:
    fecha = fecha or timezone.localdate()
    return f"Odontograma_{nombre_paciente or ''}_{formatear_fecha(fecha)}.pdf"


class OdontogramaPDFGenerator:
    """
    Dibuja el reporte directamente sobre un canvas de reportlab.

    El renderizador es cualquier objeto con `capturar(handle) -> bytes PNG`.
    """

    def __init__(self, renderizador):
        self._renderizador = renderizador
        self._ancho, self._alto = A4

    def generar(
        self,
        odontograma,
        condiciones,
        nombre_paciente: Optional[str] = None,
        email_paciente: Optional[str] = None,
        telefono_paciente: Optional[str] = None,
        handle: Optional[str] = None,
        nombre_clinica: Optional[str] = None,
        fecha_generacion: Optional[date] = None,
    ) -> bytes:
        """
        Genera el PDF y retorna los bytes.

        Con las mismas entradas (incluida `fecha_generacion`) el resultado es
        idéntico byte a byte.

        Raises:
            ValueError: si no se recibe odontograma.
        """
        if odontograma is None:
            raise ValueError("Se requiere un odontograma para generar el reporte")

        nombre_clinica = (
            nombre_clinica
            or settings.ODONTOGRAMA.get('NOMBRE_CLINICA')
            or NOMBRE_CLINICA_POR_DEFECTO
        )
        fecha_generacion = fecha_generacion or timezone.localdate()
        filas = construir_filas(condiciones)

        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        c.setTitle(f"Odontograma {nombre_paciente or ''}".strip())
        c.setAuthor(nombre_clinica)

        # ── Encabezado ───────────────────────────────────────────────────
        self._texto(c, MARGEN, 20, nombre_clinica, 18)
        self._texto(
            c, self._ancho_mm - MARGEN, 20,
            f"Fecha de Generación: {formatear_fecha(fecha_generacion)}", 10,
            derecha=True,
        )

        # ── Paciente ─────────────────────────────────────────────────────
        self._texto(c, MARGEN, 35, 'Información del Paciente', 14)
        self._texto(c, MARGEN, 42, f"Nombre: {nombre_paciente or ''}", 10)
        if email_paciente:
            self._texto(c, MARGEN, 47, f"Email: {email_paciente}", 10)
        if telefono_paciente:
            self._texto(c, MARGEN, 52, f"Teléfono: {telefono_paciente}", 10)
        self._texto(c, 100, 42, f"Odontograma: {odontograma.nombre}", 10)
        self._texto(c, 100, 47, f"Fecha Creación: {formatear_fecha(odontograma.fecha_creacion)}", 10)

        # ── Imagen ───────────────────────────────────────────────────────
        y = self._imagen(c, handle, Y_IMAGEN)

        # ── Detalle ──────────────────────────────────────────────────────
        self._texto(c, MARGEN, y, 'Detalle de Diagnósticos', 14)
        y += 10
        self._cabecera_tabla(c, y)
        y += ALTO_FILA

        for fila in filas:
            if y > Y_LIMITE_PAGINA:
                c.showPage()
                y = Y_INICIO_PAGINA
            self._fila(c, y, fila)
            y += ALTO_FILA

        c.showPage()
        c.save()

        logger.info(
            f"PDF de odontograma {odontograma.id} generado "
            f"({len(filas)} diagnósticos)"
        )
        buffer.seek(0)
        return buffer.read()

    # ── Secciones ─────────────────────────────────────────────────────────

    def _imagen(self, c, handle, y) -> float:
        """Dibuja el gráfico y retorna la nueva posición del cursor."""
        try:
            png = self._renderizador.capturar(handle)
            with Image.open(io.BytesIO(png)) as img:
                ancho_px, alto_px = img.size
        except (CapturaImagenError, OSError, ValueError) as e:
            logger.warning(f"Reporte sin imagen del odontograma ({handle}): {e}")
            self._texto(c, MARGEN, y, MENSAJE_ERROR_IMAGEN, 10)
            return y + 10

        ancho = self._ancho_mm - MARGEN * 2
        alto = ancho * alto_px / ancho_px
        c.drawImage(
            ImageReader(io.BytesIO(png)),
            MARGEN * mm,
            self._alto - (y + alto) * mm,
            width=ancho * mm,
            height=alto * mm,
        )
        return y + alto + 10

    def _cabecera_tabla(self, c, y):
        c.setFillColorRGB(*GRIS_CABECERA)
        c.rect(
            MARGEN * mm,
            self._alto - (y - 5 + ALTO_FILA) * mm,
            (self._ancho_mm - MARGEN * 2) * mm,
            ALTO_FILA * mm,
            stroke=0,
            fill=1,
        )
        c.setFillColorRGB(0, 0, 0)
        for etiqueta, x in COLUMNAS:
            self._texto(c, x, y, etiqueta, 10, negrita=True)
        self._texto(c, self._ancho_mm - 16, y, ETIQUETA_IMPORTE, 10, negrita=True, derecha=True)

    def _fila(self, c, y, fila):
        valores = [fila['fecha'], fila['diente'], fila['superficies'], fila['diagnostico'], fila['notas']]
        for (_, x), valor in zip(COLUMNAS, valores):
            self._texto(c, x, y, valor, 10)
        self._texto(c, self._ancho_mm - 16, y, fila['importe'], 10, derecha=True)

    # ── Helpers ───────────────────────────────────────────────────────────

    @property
    def _ancho_mm(self):
        return self._ancho / mm

    def _texto(self, c, x, y, texto, tamano, negrita=False, derecha=False):
        c.setFont('Helvetica-Bold' if negrita else 'Helvetica', tamano)
        if derecha:
            c.drawRightString(x * mm, self._alto - y * mm, texto)
        else:
            c.drawString(x * mm, self._alto - y * mm, texto)
