"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import Agent, User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "traveler@example.com",
            "name": "Jane Traveler",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["role"], User.Role.CLIENT)

    def test_register_agent_creates_pending_profile(self) -> None:
        payload = {
            "email": "operator@example.com",
            "name": "Mara Operator",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "AGENT",
            "business_name": "Mara Safaris",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        agent = Agent.objects.get(user__email=payload["email"])
        self.assertEqual(agent.status, Agent.Status.PENDING)
        self.assertFalse(agent.is_verified)

    def test_register_agent_requires_business_name(self) -> None:
        payload = {
            "email": "nobiz@example.com",
            "name": "No Biz",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "AGENT",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("business_name", response.data["details"])

    def test_cannot_register_as_admin(self) -> None:
        payload = {
            "email": "sneaky@example.com",
            "name": "Sneaky",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "ADMIN",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_with_wrong_password_uses_error_envelope(self) -> None:
        User.objects.create_user(email="login@example.com", password="CorrectPassword1")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Invalid e-mail or password.")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "login@example.com", "password": "CorrectPassword1"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["tokens"])
