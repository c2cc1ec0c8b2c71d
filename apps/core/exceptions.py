"""
Error taxonomy shared by the booking core and the API layer.

All errors are DRF ``APIException`` subclasses, so views let them propagate
and DRF renders them as ``{"detail": ..., "code": ...}`` with the right status.
Input problems use DRF's own ``ValidationError`` (400).
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.utils.translation import gettext_lazy as _
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFound(exceptions.NotFound):
    default_detail = _("Not found.")


class Forbidden(exceptions.PermissionDenied):
    default_detail = _("You do not have permission to perform this action.")
    default_code = "forbidden"


class Conflict(exceptions.APIException):
    """State-machine or availability violation. The caller may re-fetch and retry."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("Conflict with the current state of the resource.")
    default_code = "conflict"


class NotAvailable(Conflict):
    default_detail = _("Listing is not available.")
    default_code = "not_available"


class DuplicatePending(Conflict):
    default_detail = _("You already have a pending booking for this listing.")
    default_code = "duplicate_pending"


class InvalidTransition(Conflict):
    default_detail = _("This status transition is not allowed.")
    default_code = "invalid_transition"


class StatusChanged(Conflict):
    default_detail = _("Booking status has changed since it was read.")
    default_code = "status_changed"


class StorageFailure(exceptions.APIException):
    """Durability layer is unavailable. Nothing has been written."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _("Storage is temporarily unavailable, nothing was changed.")
    default_code = "storage_failure"


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Adds two translations on top of the stock handler:
    - django ``ValidationError`` (raised by model ``clean``) -> DRF ``ValidationError``;
    - any ``DatabaseError`` that escaped the services -> ``StorageFailure``.
    :param exc: raised exception
    :param context: DRF context (view, request, ...)
    :return: Response or None (500)
    """
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        exc = exceptions.ValidationError(detail=detail)
    elif isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception("Database error in %s", view.__class__.__name__ if view else "unknown view")
        exc = StorageFailure()

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, exceptions.APIException) and isinstance(response.data, dict):
        codes = exc.get_codes()
        if isinstance(codes, str):
            response.data.setdefault("code", codes)
    return response
