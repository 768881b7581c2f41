# api/utils/exception_handlers.py
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler
import logging

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    400: 'Error en los datos enviados',
    401: 'Credenciales no válidas',
    403: 'No tiene permisos para esta acción',
    404: 'Recurso no encontrado',
    405: 'Método no permitido',
    500: 'Error interno del servidor',
    503: 'Servicio no disponible',
}


def custom_exception_handler(exc, context):
    """
    Devuelve toda excepción con el formato estándar
    {success, status_code, message, data, errors}.

    Las ValidationError de Django (modelos y servicios del dominio) se tratan
    como errores 400 de DRF con el mismo diccionario por campo.
    """
    if isinstance(exc, DjangoValidationError):
        exc = DRFValidationError(_django_errors(exc))

    response = exception_handler(exc, context)

    if response is not None:
        logger.error(
            f"API Error: {exc.__class__.__name__} - {str(exc)}",
            extra={'context': context, 'status_code': response.status_code}
        )
        response.data = {
            'success': False,
            'status_code': response.status_code,
            'message': _get_error_message(exc, response),
            'data': None,
            'errors': _format_errors(response.data)
        }
        return response

    # Excepción no manejada por DRF
    logger.critical(
        f"Unhandled Exception: {exc.__class__.__name__} - {str(exc)}",
        exc_info=True,
        extra={'context': context}
    )
    return Response(
        {
            'success': False,
            'status_code': 500,
            'message': STATUS_MESSAGES[500],
            'data': None,
            'errors': {'detail': ['Ha ocurrido un error inesperado']}
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _django_errors(exc):
    if hasattr(exc, 'error_dict'):
        return {
            ('non_field_errors' if campo == '__all__' else campo): mensajes
            for campo, mensajes in exc.message_dict.items()
        }
    return {'non_field_errors': exc.messages}


def _get_error_message(exc, response):
    """Primer mensaje de error, o el genérico del código de estado."""
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, dict) and detail:
        first_error = next(iter(detail.values()))
        return str(first_error[0]) if isinstance(first_error, list) else str(first_error)
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if detail is not None:
        return str(detail)
    return STATUS_MESSAGES.get(response.status_code, 'Error en la solicitud')


def _format_errors(data):
    if isinstance(data, dict):
        errors = {}
        for field, messages in data.items():
            if isinstance(messages, list):
                errors[field] = [str(m) for m in messages]
            elif isinstance(messages, dict):
                errors[field] = _format_errors(messages)
            else:
                errors[field] = [str(messages)]
        return errors
    elif isinstance(data, list):
        return {'non_field_errors': [str(m) for m in data]}
    return {'detail': [str(data)]}
