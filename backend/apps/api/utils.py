from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

DEFAULT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST

ERROR_STATUS_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "PAYMENT_FAILED": status.HTTP_402_PAYMENT_REQUIRED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "OUT_OF_STOCK": status.HTTP_409_CONFLICT,
    "UNPROCESSABLE_ENTITY": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "TOO_MANY_REQUESTS": status.HTTP_429_TOO_MANY_REQUESTS,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def _require_text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"error_response requires {name} to be a string")
    value = value.strip()
    if not value:
        raise ValueError(f"error_response requires a non-empty {name}")
    return value


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    hint: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Build the ``{"error": {...}}`` envelope every endpoint uses for failures.

    ``code`` is upper-cased and mapped to an HTTP status through
    ``ERROR_STATUS_MAP`` unless ``http_status`` is given. ``details`` may be a
    mapping, a DRF ``ValidationError`` or an exception instance.
    """
    code = _require_text(code, "code").upper()
    message = _require_text(message, "message")
    if hint is not None and not isinstance(hint, str):
        raise TypeError("error_response hint must be a string if provided")
    for label, value in (("extra", extra), ("headers", headers)):
        if value is not None and not isinstance(value, Mapping):
            raise TypeError(f"error_response {label} must be a mapping if provided")

    status_code = (
        int(http_status)
        if http_status is not None
        else ERROR_STATUS_MAP.get(code, DEFAULT_ERROR_STATUS)
    )
    if not 100 <= status_code <= 599:
        raise ValueError("error_response status must be a valid HTTP status code")

    body: Dict[str, Any] = {"code": code, "message": message, "status": status_code}
    if details is not None:
        body["details"] = _normalize_details(details)
    if hint is not None:
        body["hint"] = hint
    if extra:
        body["extra"] = dict(extra)

    return Response(
        {"error": body},
        status=status_code,
        headers={str(k): str(v) for k, v in headers.items()} if headers else None,
    )


def service_error_response(error: Sequence[Any]) -> Response:
    """Render a service-layer ``(code, message, details)`` tuple."""
    code, message, details = error
    return error_response(code, message, details)
