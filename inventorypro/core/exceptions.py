"""
Domain exceptions and the DRF exception handler that wraps every error in the
`{success: false, message}` envelope.
"""
import logging

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

from .responses import error_response

logger = logging.getLogger(__name__)


class InsufficientStock(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Stock insuficiente para realizar la salida'
    default_code = 'insufficient_stock'


class InvalidMovementType(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Tipo de movimiento no válido'
    default_code = 'invalid_movement_type'


class InvalidStatusTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Transición de estado no permitida'
    default_code = 'invalid_status_transition'


class OrderNotEditable(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Solo se pueden editar órdenes pendientes'
    default_code = 'order_not_editable'


class DuplicateEmail(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'El email ya está registrado'
    default_code = 'duplicate_email'


def _first_message(detail):
    """Pull a readable message out of a DRF error detail structure"""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            return error_response(
                _first_message(exc.detail) or 'Datos inválidos',
                status_code=response.status_code,
                errors=response.data,
            )
        if isinstance(exc, Http404):
            return error_response('Recurso no encontrado', status_code=response.status_code)
        detail = getattr(exc, 'detail', None)
        return error_response(
            _first_message(detail) if detail is not None else str(exc),
            status_code=response.status_code,
        )

    # Anything DRF does not know about: 500 with the raw error message
    view = context.get('view')
    logger.error(
        f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {str(exc)}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return error_response(
        'Error interno del servidor',
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error=str(exc),
    )
