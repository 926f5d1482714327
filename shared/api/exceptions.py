"""DRF exception handler that renders every failure as ``{"error": message}``."""

from __future__ import annotations

import logging
from typing import Any

from django.db import DatabaseError  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _first_message(detail: Any) -> str:
    """Pick the first human readable message out of a DRF error structure."""

    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ("non_field_errors", "detail"):
                return message
            return f"{field}: {message}"
        return "Invalid request"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    view = context.get("view")

    if isinstance(exc, DomainError):
        if exc.status_code >= 500:
            logger.error("Dependency failure in %s: %s", view.__class__.__name__, exc, exc_info=exc)
            return Response({"error": INTERNAL_ERROR_MESSAGE}, status=exc.status_code)
        return Response({"error": exc.message}, status=exc.status_code)

    if isinstance(exc, DatabaseError):
        logger.error("Database failure in %s", view.__class__.__name__, exc_info=exc)
        return Response({"error": INTERNAL_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        response.data = {"error": _first_message(exc.detail), "details": exc.detail}
    else:
        response.data = {"error": _first_message(response.data)}
    return response
