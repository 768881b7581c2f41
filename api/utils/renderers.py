# api/utils/renderers.py
from rest_framework.renderers import BaseRenderer, JSONRenderer

STATUS_MESSAGES = {
    200: 'Operación exitosa',
    201: 'Recurso creado exitosamente',
    204: 'Recurso eliminado exitosamente',
    400: 'Error en los datos enviados',
    401: 'No autenticado',
    403: 'No tiene permisos para esta acción',
    404: 'Recurso no encontrado',
    500: 'Error interno del servidor',
    503: 'Servicio no disponible',
}


class StandardizedJSONRenderer(JSONRenderer):
    """
    Envuelve las respuestas en {success, status_code, message, data, errors}.

    Si la vista devuelve 'message' o 'notificaciones' dentro de los datos,
    se suben al nivel del sobre.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        # Sin response (browsable API) o ya en formato estándar
        if not response:
            return super().render(data, accepted_media_type, renderer_context)
        if isinstance(data, dict) and 'success' in data and 'status_code' in data:
            return super().render(data, accepted_media_type, renderer_context)

        ok = response.status_code < 400
        notificaciones = data.pop('notificaciones', None) if isinstance(data, dict) else None

        sobre = {
            'success': ok,
            'status_code': response.status_code,
            'message': self._get_message(data, response),
            'data': data if ok else None,
            'errors': data if not ok else None,
        }
        if notificaciones is not None:
            sobre['notificaciones'] = notificaciones

        return super().render(sobre, accepted_media_type, renderer_context)

    def _get_message(self, data, response):
        if isinstance(data, dict) and 'message' in data:
            return data.pop('message')
        return STATUS_MESSAGES.get(response.status_code, 'Operación completada')


class PDFRenderer(BaseRenderer):
    """Deja pasar los bytes del PDF sin envolverlos."""
    media_type = 'application/pdf'
    format = 'pdf'
    charset = None
    render_style = 'binary'

    def render(self, data, accepted_media_type=None, renderer_context=None):
        return data
