"""
API error contract.

Every error response body has the shape ``{"error": "<message>"}``;
validation failures add ``"details"`` with the field-level messages.
Service-layer business rule violations subclass ``ServiceError`` and are
rendered as 400 responses unless they carry another status code.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from django.core.exceptions import ObjectDoesNotExist  # type: ignore
from django.http import Http404  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for business rule violations raised by services."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


def _first_message(detail: Any) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return "Invalid input."
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid input."
    return str(detail)


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER`` producing the ``{"error": ...}`` envelope."""
    if isinstance(exc, ServiceError):
        return Response({"error": exc.message}, status=exc.status_code)

    if isinstance(exc, ObjectDoesNotExist):
        exc = Http404(str(exc))

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=exc,
        )
        return Response(
            {"error": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = {"error": _first_message(exc.detail), "details": exc.detail}
    elif isinstance(exc, Http404):
        response.data = {"error": str(exc) or "Not found."}
    elif isinstance(exc, exceptions.APIException):
        response.data = {"error": _first_message(exc.detail)}
    return response
