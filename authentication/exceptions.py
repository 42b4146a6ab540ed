# exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import Throttled, ValidationError as DRFValidationError
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError
from django.utils import timezone
import logging
from django.conf import settings

from inventory.exceptions import MenuIntegrityError, MenuValidationError, StorageUnavailable

logger = logging.getLogger(__name__)


def error_payload(message, error_code, **extra):
    """JSON error body shared by every API endpoint"""
    payload = {
        'success': False,
        'error': message,
        'error_code': error_code,
        'timestamp': timezone.now().isoformat(),
    }
    payload.update(extra)
    return payload


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the public and admin JSON endpoints
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        error_code = 'REQUEST_ERROR'
        message = 'An error occurred'
        extra = {}

        # Handle specific error types
        if isinstance(exc, Throttled):
            error_code = 'RATE_LIMIT_EXCEEDED'
            message = 'Too many requests. Please try again later.'
            extra['retry_after'] = int(exc.wait) if exc.wait is not None else 3600
        elif isinstance(exc, DRFValidationError):
            error_code = 'INVALID_PARAMETER'
            message = 'Validation error'
            extra['details'] = response.data
        elif response.status_code in (401, 403):
            error_code = 'PERMISSION_DENIED'
            message = 'Authentication required' if response.status_code == 401 else 'Permission denied'
        elif response.status_code == 404:
            error_code = 'NOT_FOUND'
            message = 'Resource not found'
        elif response.status_code == 405:
            error_code = 'METHOD_NOT_ALLOWED'
            message = 'Method not allowed'

        response.data = error_payload(message, error_code, **extra)
        return response

    # Handle domain and Django validation errors
    if isinstance(exc, (MenuValidationError, ValidationError)):
        logger.warning(f"Validation Error: {exc}")
        messages = getattr(exc, 'messages', [str(exc)])
        return Response(
            error_payload('Validation error', 'INVALID_PARAMETER', details={'non_field_errors': messages}),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, MenuIntegrityError):
        logger.warning(f"Integrity Error: {exc}")
        return Response(
            error_payload(str(exc), 'INTEGRITY_ERROR'),
            status=status.HTTP_400_BAD_REQUEST,
        )

    # IntegrityError is a DatabaseError, but means a constraint was violated
    if isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        return Response(
            error_payload('This operation violates database constraints', 'INTEGRITY_ERROR'),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, (StorageUnavailable, DatabaseError)):
        logger.exception(f"Database Error: {exc}")
        return Response(
            error_payload('Service temporarily unavailable', 'DATABASE_ERROR', retry_after=60),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    # Handle unexpected errors
    logger.exception(f"Unexpected Error: {exc}")
    extra = {'details': str(exc)} if settings.DEBUG else {}
    return Response(
        error_payload('An unexpected error occurred', 'INTERNAL_ERROR', **extra),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
