import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base exception for business rule violations."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DomainError):
    """Raised when a referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Forbidden(DomainError):
    """Raised when the actor lacks authority for an action."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class Conflict(DomainError):
    """Raised when the current state of a resource forbids the action."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource state conflicts with this request"


class BadRequest(DomainError):
    """Raised when input data is invalid or violates domain rules."""
    status_code = status.HTTP_400_BAD_REQUEST


def api_exception_handler(exc, context):
    """Render domain errors as ``{"message", "status_code"}`` JSON bodies.

    Anything else falls through to DRF's default handler.
    """
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "%s in %s: %s",
            exc.__class__.__name__,
            view.__class__.__name__ if view else "-",
            exc.message,
        )
        return Response(
            {"message": exc.message, "status_code": exc.status_code},
            status=exc.status_code,
        )

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, (Http404, PermissionDenied)):
        response.data = {"message": str(exc) or response.data.get("detail"), "status_code": response.status_code}
    return response
