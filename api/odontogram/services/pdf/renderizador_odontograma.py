# api/odontogram/services/pdf/renderizador_odontograma.py
"""
Convierte un identificador de gráfico en una imagen PNG para el reporte.

    odontograma-<uuid>  -> gráfico generado en el servidor (SVG rasterizado)
    captura-<uuid>      -> última captura subida por el cliente

La imagen siempre sale sobre fondo blanco. El gráfico del servidor se
rasteriza al doble de su escala nominal; la captura del cliente llega ya
escalada.
El gráfico del servidor no incluye controles interactivos.
"""
import io
import logging

from django.conf import settings
from PIL import Image

from api.odontogram.exceptions import CapturaImagenError
from api.odontogram.repositories.odontogram_repositories import (
    CapturaOdontogramaRepository,
    OdontogramaRepository,
)
from api.odontogram.services.condicion_store import CondicionStore
from api.odontogram.services.estado_diente_service import EstadoDienteService
from api.odontogram.services.odontograma_capture_service import PREFIJO_HANDLE as PREFIJO_CAPTURA
from api.odontogram.services.pdf.odontograma_svg_generator import OdontogramaSVGGenerator

logger = logging.getLogger(__name__)

PREFIJO_ODONTOGRAMA = 'odontograma-'


def handle_odontograma(odontograma):
    return f"{PREFIJO_ODONTOGRAMA}{odontograma.id}"


class RenderizadorOdontograma:

    def __init__(self, escala=None, odontogramas=None, capturas=None):
        self.escala = escala or settings.ODONTOGRAMA.get('ESCALA_CAPTURA', 2)
        self._odontogramas = odontogramas or OdontogramaRepository()
        self._capturas = capturas or CapturaOdontogramaRepository()

    def capturar(self, handle):
        """
        Retorna los bytes PNG del gráfico identificado por `handle`.

        Raises:
            CapturaImagenError: el identificador no corresponde a un gráfico
                o la rasterización falló.
        """
        if not isinstance(handle, str) or not handle:
            raise CapturaImagenError(handle, "Identificador vacío")

        try:
            if handle.startswith(PREFIJO_ODONTOGRAMA):
                return self._desde_odontograma(handle[len(PREFIJO_ODONTOGRAMA):])
            if handle.startswith(PREFIJO_CAPTURA):
                return self._desde_captura(handle[len(PREFIJO_CAPTURA):])
        except CapturaImagenError:
            raise
        except Exception as e:
            logger.error(f"Error rasterizando '{handle}': {e}", exc_info=True)
            raise CapturaImagenError(handle, str(e)) from e

        raise CapturaImagenError(handle, "Identificador no reconocido")

    # ── Fuentes ────────────────────────────────────────────────────────────

    def _desde_odontograma(self, odontograma_id):
        handle = f"{PREFIJO_ODONTOGRAMA}{odontograma_id}"
        odontograma = self._odontogramas.get_by_id(odontograma_id)
        if odontograma is None:
            raise CapturaImagenError(handle, "Odontograma no encontrado")

        store = CondicionStore.desde_odontograma(odontograma)
        estados = EstadoDienteService.estados_odontograma(store)
        svg = OdontogramaSVGGenerator.generar_svg(estados, titulo=odontograma.nombre.upper())
        return OdontogramaSVGGenerator.svg_a_png(svg, escala=self.escala)

    def _desde_captura(self, odontograma_id):
        handle = f"{PREFIJO_CAPTURA}{odontograma_id}"
        odontograma = self._odontogramas.get_by_id(odontograma_id)
        captura = self._capturas.get_by_odontograma(odontograma.id) if odontograma else None
        if captura is None or not captura.tiene_imagen():
            raise CapturaImagenError(handle, "No existe captura para el odontograma")

        with captura.imagen.open('rb') as f:
            return self._sobre_blanco(f.read())

    @staticmethod
    def _sobre_blanco(contenido):
        """Aplana transparencias sobre blanco."""
        with Image.open(io.BytesIO(contenido)) as img:
            rgba = img.convert('RGBA')
            fondo = Image.new('RGBA', rgba.size, (255, 255, 255, 255))
            plano = Image.alpha_composite(fondo, rgba).convert('RGB')
            buffer = io.BytesIO()
            plano.save(buffer, format='PNG')
            return buffer.getvalue()
