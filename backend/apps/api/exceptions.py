from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response, status_for_code
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

SERVER_ERROR_MESSAGE = _("Something went wrong")


class ApplicationError(Exception):
    """
    Domain-level error raised from services or views.

    Args:
        code: Machine readable error code.
        message: Human readable explanation of the error.
        status_code: Optional explicit HTTP status. If omitted, code mapping is used.
        details: Optional structured details for clients.
        hint: Optional hint for remediation.
        headers: Optional mapping of headers to include in the response.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code if status_code is not None else status_for_code(code)
        self.details = details
        self.hint = hint
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            headers=self.headers,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Render every exception escaping a DRF view as the standard error envelope."""

    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        bound_logger.info("Handled application error", code=exc.code, status=exc.status_code)
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(
            exc.message_dict if hasattr(exc, "error_dict") else list(exc.messages)
        )

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return error_response(
        "SERVER_ERROR",
        str(SERVER_ERROR_MESSAGE),
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
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


def _from_drf_exception(exc: Exception, response: Response, bound_logger) -> Response:
    status_code = response.status_code
    code, message, details = _normalize_payload(exc, response.data, status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None
    if status_code >= 500:
        bound_logger.error("Converted server error", code=code, status=status_code)
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)
    return error_response(code, message, details, http_status=status_code, headers=headers)


def _normalize_payload(
    exc: Exception, payload: Any, status_code: int
) -> Tuple[str, str, Optional[Any]]:
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR", _extract_message(payload, "Validation failed", status_code), payload
    if isinstance(exc, ParseError):
        return "VALIDATION_ERROR", _extract_message(payload, "Malformed request", status_code), None
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return "UNAUTHORIZED", _extract_message(payload, "Authentication required", status_code), None
    if isinstance(exc, PermissionDenied):
        return (
            "FORBIDDEN",
            _extract_message(payload, "You do not have permission to perform this action", status_code),
            None,
        )
    if isinstance(exc, (NotFound, Http404)):
        return "NOT_FOUND", _extract_message(payload, "Resource not found", status_code), None
    if isinstance(exc, MethodNotAllowed):
        return "METHOD_NOT_ALLOWED", _extract_message(payload, "Method not allowed", status_code), None
    if status_code >= 500:
        return "SERVER_ERROR", str(SERVER_ERROR_MESSAGE), None
    return "UNKNOWN_ERROR", _extract_message(payload, "Request failed", status_code), None


def _extract_message(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        return str(SERVER_ERROR_MESSAGE)
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler"]
