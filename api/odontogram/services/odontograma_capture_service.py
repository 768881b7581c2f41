# api/odontogram/services/odontograma_capture_service.py
"""
Servicio para gestionar las capturas del odontograma enviadas por el cliente.
"""
import logging
from typing import Any, Dict, Optional

from django.db import DatabaseError, transaction
from PIL import Image, UnidentifiedImageError

from api.odontogram.models import CapturaOdontograma, Odontograma

logger = logging.getLogger(__name__)

PREFIJO_HANDLE = 'captura-'


class OdontogramaCaptureService:
    """
    Servicio centralizado para manejar capturas de odontograma.
    """

    @staticmethod
    def handle_de(odontograma: Odontograma) -> str:
        """Identificador con el que el PDF pide la captura almacenada"""
        return f"{PREFIJO_HANDLE}{odontograma.id}"

    @staticmethod
    def validar_imagen(imagen_file) -> Optional[str]:
        """Retorna un mensaje de error o None si la imagen es un PNG/JPEG legible."""
        try:
            with Image.open(imagen_file) as img:
                formato = img.format
                img.verify()
        except (UnidentifiedImageError, OSError) as e:
            return f"Archivo de imagen inválido: {e}"
        finally:
            imagen_file.seek(0)

        if formato not in ('PNG', 'JPEG'):
            return f"Formato no soportado: {formato}"
        return None

    @staticmethod
    def guardar_imagen(
        odontograma: Odontograma,
        imagen_file,
        observaciones: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Guarda (o reemplaza) la imagen del odontograma.

        Args:
            odontograma: Instancia de Odontograma
            imagen_file: Archivo de imagen (UploadedFile o ContentFile)
            observaciones: Notas opcionales sobre la captura

        Returns:
            Diccionario con el resultado de la operación
        """
        error = OdontogramaCaptureService.validar_imagen(imagen_file)
        if error:
            return {'success': False, 'error': error}

        try:
            with transaction.atomic():
                captura, created = CapturaOdontograma.objects.get_or_create(
                    odontograma=odontograma,
                    defaults={'imagen': imagen_file, 'observaciones': observaciones or ''},
                )

                if not created:
                    # Reemplazar el archivo anterior
                    if captura.imagen:
                        captura.imagen.delete(save=False)
                    captura.imagen = imagen_file
                    if observaciones:
                        captura.observaciones = observaciones
                    captura.save()
        except (DatabaseError, OSError) as e:
            logger.error(
                f"Error al guardar imagen de odontograma {odontograma.id}: {e}",
                exc_info=True
            )
            return {'success': False, 'error': str(e)}

        logger.info(
            f"Imagen de odontograma {'creada' if created else 'actualizada'} "
            f"para odontograma {odontograma.id}"
        )
        return {
            'success': True,
            'created': created,
            'handle': OdontogramaCaptureService.handle_de(odontograma),
            'fecha_captura': captura.fecha_captura,
            'imagen_url': captura.imagen.url if captura.tiene_imagen() else None,
        }
