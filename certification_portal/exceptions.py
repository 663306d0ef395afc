"""
Error taxonomy shared by every app.

Each error is a DRF ``APIException`` so it stays scoped to the request that
raised it; ``portal_exception_handler`` turns all of them into the
``{"success": false, "message": ...}`` payload the frontend reads.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class PortalError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "error"


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class AuthError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"
    default_code = "auth_error"


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class StateConflictError(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This action is not allowed in the current state."
    default_code = "state_conflict"


class StorageError(PortalError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "File storage is unavailable. Please try again."
    default_code = "storage_error"


def _first_message(data):
    if isinstance(data, dict):
        for value in data.values():
            return _first_message(value)
        return ""
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ""
    return str(data)


def portal_exception_handler(exc, context):
    # imported here: models import this module before DRF views are loadable
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}", exc_info=True)
        return Response(
            {"success": False, "message": "Something went wrong. Please try again."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    data = response.data
    if isinstance(data, dict) and set(data) == {"detail"}:
        response.data = {"success": False, "message": str(data["detail"])}
    else:
        # serializer field errors
        response.data = {"success": False, "message": _first_message(data), "errors": data}
    return response
