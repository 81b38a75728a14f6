"""Standardized error payloads for the REST API.

Every framework-level error (authentication, permission, parsing,
validation, throttling, 404) is rendered as::

    {
        "type": "client_error",
        "errors": [{"code": "not_authenticated", "detail": "...", "attr": null}]
    }

Domain exceptions are translated by the views before they reach DRF,
so anything arriving here that DRF does not recognise is a server error
and is left to Django (re-raised) after being logged.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework.exceptions import (
    APIException,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the ``type`` / ``errors`` envelope."""
    if isinstance(exc, Http404):
        exc = NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = PermissionDenied()

    response = exception_handler(exc, context)
    if response is None:
        logger.error("api.unhandled_exception", error=str(exc), exc_type=type(exc).__name__)
        return None

    if isinstance(exc, ValidationError):
        error_type = "validation_error"
        errors = _flatten_validation_errors(exc.detail)
    else:
        error_type = "server_error" if response.status_code >= 500 else "client_error"
        errors = [_error_entry(exc)]

    response.data = {"type": error_type, "errors": errors}
    logger.info(
        "api.error_response",
        status_code=response.status_code,
        error_type=error_type,
        codes=[e["code"] for e in errors],
    )
    return response


def _error_entry(exc: Exception) -> Dict[str, Any]:
    if isinstance(exc, APIException):
        detail = exc.detail
        if isinstance(detail, dict):
            # simplejwt packs {"detail", "code", "messages"} into one error
            return {
                "code": str(detail.get("code", exc.default_code)),
                "detail": str(detail.get("detail", exc.default_detail)),
                "attr": None,
            }
        code = getattr(detail, "code", None) or exc.default_code
        return {"code": code, "detail": str(detail), "attr": None}
    return {"code": "error", "detail": str(exc), "attr": None}


def _flatten_validation_errors(detail: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Turn DRF's nested ``ValidationError.detail`` into a flat list."""
    if isinstance(detail, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in detail.items():
            name = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                name = attr
            errors.extend(_flatten_validation_errors(value, name))
        return errors
    if isinstance(detail, list):
        errors = []
        for item in detail:
            errors.extend(_flatten_validation_errors(item, attr))
        return errors
    return [
        {
            "code": getattr(detail, "code", None) or "invalid",
            "detail": str(detail),
            "attr": attr,
        }
    ]


class Conflict(APIException):
    status_code = 409
    default_detail = "Resource conflict."
    default_code = "conflict"


def pydantic_errors_to_detail(exc: Any) -> Dict[str, List[str]]:
    """Map a ``pydantic.ValidationError`` onto DRF's field -> messages shape."""
    detail: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "non_field_errors"
        message = str(error.get("msg", "Invalid value.")).removeprefix("Value error, ")
        detail.setdefault(field, []).append(message)
    return detail
