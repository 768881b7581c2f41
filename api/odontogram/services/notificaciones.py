# api/odontogram/services/notificaciones.py
"""
Notificaciones al operador (toasts).

Los servicios reciben el notificador por parámetro; no existe un
despachador global. Todas las implementaciones exponen
info / success / warning / error (mensaje) y no esperan respuesta.
"""
import logging

from django.conf import settings


def _config_notificacion():
    config = getattr(settings, 'ODONTOGRAMA', {})
    return {
        'posicion': config.get('NOTIFICACION_POSICION', 'top-right'),
        'auto_cierre_ms': config.get('NOTIFICACION_AUTO_CIERRE_MS', 4000),
        'cerrar_al_click': True,
        'arrastrable': True,
    }


class Notificador:
    """Interfaz base; las subclases implementan `_emitir`."""

    def info(self, mensaje):
        self._emitir('info', mensaje)

    def success(self, mensaje):
        self._emitir('success', mensaje)

    def warning(self, mensaje):
        self._emitir('warning', mensaje)

    def error(self, mensaje):
        self._emitir('error', mensaje)

    def _emitir(self, tipo, mensaje):
        raise NotImplementedError


class NotificadorMemoria(Notificador):
    """
    Acumula las notificaciones de una petición para devolverlas al cliente
    junto con la respuesta, con las opciones de visualización del toast.
    """

    def __init__(self):
        self.mensajes = []

    def _emitir(self, tipo, mensaje):
        self.mensajes.append({'tipo': tipo, 'mensaje': mensaje, **_config_notificacion()})

    def como_lista(self):
        return list(self.mensajes)


class NotificadorLog(Notificador):
    """Envía las notificaciones al log de la aplicación."""

    NIVELES = {
        'info': logging.INFO,
        'success': logging.INFO,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }

    def __init__(self, nombre_logger=__name__):
        self._logger = logging.getLogger(nombre_logger)

    def _emitir(self, tipo, mensaje):
        self._logger.log(self.NIVELES[tipo], f"[{tipo.upper()}] {mensaje}")
