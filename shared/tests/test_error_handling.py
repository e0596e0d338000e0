"""Tests for the error envelope and best-effort side effects."""

from __future__ import annotations

from unittest import mock

from django.core.exceptions import ObjectDoesNotExist
from rest_framework import exceptions, status

from shared.application.side_effects import best_effort
from shared.infrastructure.exceptions import ServiceError, api_exception_handler


def test_service_error_default_and_custom_status():
    response = api_exception_handler(ServiceError("Tour is not available for booking"), {})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data == {"error": "Tour is not available for booking"}

    response = api_exception_handler(ServiceError("Nope", status_code=403), {})
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_validation_error_keeps_details():
    exc = exceptions.ValidationError({"email": ["Enter a valid email address."]})
    response = api_exception_handler(exc, {})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["error"] == "Enter a valid email address."
    assert "email" in response.data["details"]


def test_missing_object_becomes_404():
    response = api_exception_handler(ObjectDoesNotExist("Booking matching query does not exist."), {})
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "error" in response.data


def test_unexpected_error_becomes_500():
    response = api_exception_handler(KeyError("boom"), {})
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.data == {"error": "Internal server error"}


def test_best_effort_returns_result_or_none():
    assert best_effort(lambda x: x * 2, 21) == 42

    def explode():
        raise ConnectionError("smtp unreachable")

    with mock.patch("shared.application.side_effects.logger") as logger:
        assert best_effort(explode, description="send email") is None
    message = logger.warning.call_args.args[0]
    assert "send email" in message
