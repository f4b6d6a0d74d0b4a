"""
Domain error taxonomy and the DRF exception handler that renders it.

Taxonomy
--------
Every error raised by the services is a DRF `APIException` so views never
translate errors by hand:

    ValidationError      400  missing or invalid input
    ConflictError        400  duplicate registration
    AuthenticationError  401  bad credentials or bad/missing bearer token
    AuthorizationError   403  authenticated but not the owner
    NotFoundError        404  unknown or malformed id
    InternalError        500  unexpected failure

Each error may carry `errors`, a mapping of field name -> list of messages.

Envelope
--------
`api_exception_handler` (configured as DRF's `EXCEPTION_HANDLER`) renders every
failure, including DRF's and Django's own exceptions and anything unexpected, as:

    {"success": false, "message": "...", "errors": {...}?}

Unexpected exceptions become a 500 with a generic message; when `DEBUG` is on
the message is the exception text and a `stack` key carries the traceback.

Security
--------
- Raw store exceptions (e.g. `DatabaseError`) never reach the client outside DEBUG.
- 401 responses keep the `WWW-Authenticate` header DRF computes.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Mapping, Optional

from django.conf import settings
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger("core.exceptions")

GENERIC_ERROR_MESSAGE = "Something went wrong!"
NO_TOKEN_MESSAGE = "Not authorized, no token"
TOKEN_FAILED_MESSAGE = "Not authorized, token failed"


class DomainError(exceptions.APIException):
    """
    Base class for the API's error taxonomy.

    Args:
        message: Human-readable message placed in the envelope's `message`.
        errors: Optional field -> messages mapping placed under `errors`.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_ERROR_MESSAGE
    default_code = "error"

    def __init__(self, message: Optional[str] = None, *, errors: Optional[Mapping[str, Any]] = None):
        super().__init__(detail=message)
        self.errors = dict(errors) if errors else None

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request data"
    default_code = "invalid"


class ConflictError(DomainError):
    # Duplicate registrations answer 400 like every other bad registration.
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Resource already exists"
    default_code = "conflict"


class AuthenticationError(DomainError, exceptions.AuthenticationFailed):
    """
    Bad credentials or a bad bearer token.

    Also an `AuthenticationFailed` so DRF attaches `WWW-Authenticate` and keeps
    the 401 status when raised from an authentication class.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authorized"
    default_code = "authentication_failed"


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"
    default_code = "permission_denied"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"
    default_code = "not_found"


class InternalError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_ERROR_MESSAGE
    default_code = "internal_error"


def _translate(exc: Exception) -> Exception:
    """Map Django-level exceptions onto the taxonomy; pass everything else through."""
    if isinstance(exc, Http404):
        return NotFoundError()
    if isinstance(exc, DjangoPermissionDenied):
        return AuthorizationError()
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "error_dict"):
            return ValidationError(errors=exc.message_dict)
        return ValidationError(" ".join(exc.messages))
    return exc


def _message_and_errors(exc: exceptions.APIException) -> tuple[str, Optional[dict]]:
    """Derive the envelope's `message` and `errors` from any DRF exception."""
    if isinstance(exc, DomainError):
        return exc.message, exc.errors
    if isinstance(exc, exceptions.NotAuthenticated):
        return NO_TOKEN_MESSAGE, None

    detail = exc.detail
    if isinstance(detail, dict):
        return ValidationError.default_detail, detail
    if isinstance(detail, list):
        return " ".join(str(item) for item in detail) or ValidationError.default_detail, None
    return str(detail), None


def _internal_error_response(exc: Exception, context: dict) -> Response:
    """Render an unexpected exception as an `InternalError` envelope and log it with traceback."""
    # Lazy: `rest_framework.views` loads the authentication classes, which import this module.
    from rest_framework.views import set_rollback

    view = context.get("view")
    logger.error(
        "unhandled exception in %s: %s",
        type(view).__name__ if view is not None else "-",
        type(exc).__name__,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    set_rollback()

    error = InternalError()
    payload: dict[str, Any] = {"success": False, "message": error.message}
    if settings.DEBUG:
        payload["message"] = str(exc) or type(exc).__name__
        payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return Response(payload, status=error.status_code)


def api_exception_handler(exc: Exception, context: dict) -> Response:
    """
    DRF `EXCEPTION_HANDLER` producing the `{success: false, ...}` envelope.

    DRF's default handler still runs first so headers (`WWW-Authenticate`,
    `Retry-After`) and transaction rollback behave as usual.
    """
    from rest_framework.views import exception_handler as drf_exception_handler

    exc = _translate(exc)
    response = drf_exception_handler(exc, context)
    if response is None:
        return _internal_error_response(exc, context)

    message, errors = _message_and_errors(exc)
    payload: dict[str, Any] = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    response.data = payload
    return response
