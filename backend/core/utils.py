"""Helpers shared by the tracker API views"""
from rest_framework import status
from rest_framework.response import Response

from .exceptions import NotFound, OperationNotSupported, ValidationError

ERROR_STATUS_CODES = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (OperationNotSupported, status.HTTP_405_METHOD_NOT_ALLOWED),
]


def status_for_error(exc):
    """HTTP status for a tracker domain error (400 when the type is unknown)"""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_response(exc, status_code=None, **extra):
    """
    Build the ``{'error': ...}`` response for a tracker domain error.

    Field errors carried by a ValidationError are returned under ``details``.
    """
    payload = {'error': exc.message}
    errors = getattr(exc, 'errors', None)
    if errors:
        payload['details'] = errors
    payload.update(extra)
    return Response(payload, status=status_code or status_for_error(exc))


def server_error_response(message='An unexpected error occurred'):
    return Response({'error': message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
