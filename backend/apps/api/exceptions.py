from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Union

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

SERVER_ERROR_MESSAGE = "Something went wrong"

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", "Validation failed"),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", "Authentication required"),
    status.HTTP_403_FORBIDDEN: (
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Resource not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed"),
    status.HTTP_409_CONFLICT: ("CONFLICT", "Resource conflict"),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "UNSUPPORTED_MEDIA_TYPE",
        "Unsupported media type",
    ),
    status.HTTP_429_TOO_MANY_REQUESTS: ("TOO_MANY_REQUESTS", "Request was throttled"),
    status.HTTP_503_SERVICE_UNAVAILABLE: (
        "SERVICE_UNAVAILABLE",
        "Service temporarily unavailable",
    ),
}

# DRF exception type -> (code, fallback message); first match wins
_EXCEPTION_CODES = (
    (ValidationError, "VALIDATION_ERROR", "Validation failed"),
    (ParseError, "VALIDATION_ERROR", "Malformed request"),
    (AuthenticationFailed, "UNAUTHORIZED", "Authentication failed"),
    (NotAuthenticated, "UNAUTHORIZED", "Authentication required"),
    (
        (PermissionDenied, DjangoPermissionDenied),
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    ((NotFound, Http404), "NOT_FOUND", "Resource not found"),
    (MethodNotAllowed, "METHOD_NOT_ALLOWED", "Method not allowed"),
    (Throttled, "TOO_MANY_REQUESTS", "Request was throttled"),
)


class ApplicationError(Exception):
    """
    Error raised by services or views that already knows its API shape.

    Domain errors (coupon rejections, checkout failures, payment
    verification) subclass this so views can return ``exc.to_response()``
    and anything that escapes is still rendered by the global handler.
    """

    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        code: Optional[str] = None,
        message: str = "",
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.extra = extra
        self.headers = headers

    def as_tuple(self) -> Tuple[str, str, Optional[Any]]:
        return self.code, self.message, self.details

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            extra=self.extra,
            headers=self.headers,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER`` that renders every failure as an error envelope."""
    log = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        log.info("Handled application error", code=exc.code, status=exc.status_code)
        return exc.to_response()

    if isinstance(exc, IntegrityError):
        log.warning("Integrity error reached the API layer", error=str(exc))
        return error_response("CONFLICT", "Resource conflict")

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_django_validation_detail(exc))

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception bubbled to global handler")
        return error_response(
            "SERVER_ERROR",
            SERVER_ERROR_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code, message, details, hint = _describe(exc, response.data, response.status_code)
    if response.status_code >= 500:
        log.error("Converted server error", code=code, status=response.status_code)
    else:
        log.info("Converted API exception", code=code, status=response.status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None
    return error_response(
        code,
        message,
        details,
        http_status=response.status_code,
        hint=hint,
        headers=headers,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _django_validation_detail(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], list]:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


def _describe(
    exc: Exception, payload: Any, status_code: int
) -> Tuple[str, str, Optional[Any], Optional[str]]:
    for exc_types, code, fallback in _EXCEPTION_CODES:
        if not isinstance(exc, exc_types):
            continue
        message = _extract_message(payload, fallback, status_code)
        if code == "VALIDATION_ERROR":
            return code, message, payload, None
        if isinstance(exc, MethodNotAllowed):
            allowed = list(getattr(exc, "allowed_methods", []) or [])
            return code, message, ({"allowedMethods": allowed} if allowed else None), None
        if isinstance(exc, Throttled) and exc.wait is not None:
            return (
                code,
                message,
                {"retryAfter": exc.wait},
                "Wait before retrying this request.",
            )
        return code, message, None, None

    if status_code >= 500:
        return "SERVER_ERROR", SERVER_ERROR_MESSAGE, None, None
    code, fallback = STATUS_CODE_DEFAULTS.get(status_code, ("UNKNOWN_ERROR", "Request failed"))
    details = payload if isinstance(payload, (dict, list)) and payload else None
    return code, _extract_message(payload, fallback, status_code), details, None


def _extract_message(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        return SERVER_ERROR_MESSAGE
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler"]
