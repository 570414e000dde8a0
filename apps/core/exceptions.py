"""
Error taxonomy and API error boundary for the POS back office.

Every failure that reaches a view is rendered as a JSON body of the shape
``{"message": "...", "errors": {...}}`` where ``errors`` is only present for
field-level validation problems.
"""

import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class POSError(exceptions.APIException):
    """Base class for domain errors raised by the POS services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Unexpected error"
    default_code = "error"

    def __init__(self, message=None, errors=None):
        super().__init__(detail=message or self.default_detail, code=self.default_code)
        self.message = str(self.detail)
        self.errors = errors


class ValidationError(POSError):
    """Malformed or missing required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid data"
    default_code = "invalid"


class OutOfRangeError(ValidationError):
    """A draft sale item position that does not exist."""

    default_detail = "Item index out of range"
    default_code = "out_of_range"


class NotFoundError(POSError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class ConflictError(POSError):
    """The operation conflicts with the current state (e.g. deleting the default client)."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"
    default_code = "conflict"


class StorageError(POSError):
    """The underlying database rejected or failed a unit of work."""

    default_detail = "Storage failure"
    default_code = "storage_error"


def api_exception_handler(exc, context):
    """
    DRF exception handler producing ``{message, errors?}`` bodies.

    Any request transaction opened by ``ATOMIC_REQUESTS`` is marked for rollback
    before an error response is returned.

    Configured through ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.
    """
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, POSError):
        body = {"message": exc.message}
        if exc.errors:
            body["errors"] = exc.errors
        if exc.status_code >= 500:
            logger.error(f"{view_name} failed: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{view_name} rejected request: {exc.message}")
        set_rollback()
        return Response(body, status=exc.status_code)

    if isinstance(exc, exceptions.ValidationError):
        logger.warning(f"{view_name} rejected invalid payload")
        set_rollback()
        return Response(
            {"message": "Invalid data", "errors": exc.detail},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, Http404):
        set_rollback()
        return Response({"message": "Not found"}, status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        response.data = {"message": str(detail) if detail else "Request failed"}
        return response

    logger.exception(f"Unhandled error in {view_name}", exc_info=exc)
    set_rollback()
    return Response(
        {"message": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
