"""Domain errors and the DRF exception handler"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class RecimsError(Exception):
    """Base class for business-rule failures surfaced to the client as a message"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class TenantAccessError(RecimsError):
    status_code = status.HTTP_403_FORBIDDEN


def api_exception_handler(exc, context):
    """
    DRF's handler, extended so domain errors and unexpected exceptions
    come back as ``{"error": "..."}`` instead of an HTML 500 page.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, RecimsError):
        return Response({'error': exc.message}, status=exc.status_code)

    view = context.get('view')
    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
    return Response({'error': str(exc) or 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
