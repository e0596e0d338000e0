"""Tests for commission tiers, agent classification and rate changes."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLog
from apps.finances.models import CommissionTier
from apps.finances.services import classify_agent
from apps.users.models import Agent, User


def tier(name: str, min_bookings: int, min_revenue=None, is_active: bool = True) -> CommissionTier:
    return CommissionTier(
        name=name,
        min_bookings=min_bookings,
        min_revenue=Decimal(min_revenue) if min_revenue is not None else None,
        commission_rate=Decimal("10.00"),
        is_active=is_active,
    )


TIERS = [
    tier("Bronze", 0),
    tier("Silver", 10, "5000"),
    tier("Gold", 50, "25000"),
    tier("Platinum", 100, is_active=False),
]


@pytest.mark.parametrize(
    "bookings, revenue, expected",
    [
        (0, "0", "Bronze"),
        (12, "6000", "Silver"),
        (12, "4000", "Bronze"),
        (60, "30000", "Gold"),
        (150, "100000", "Gold"),
    ],
)
def test_classify_agent(bookings, revenue, expected):
    assert classify_agent(bookings, Decimal(revenue), TIERS).name == expected


def test_classify_agent_without_matching_tier():
    assert classify_agent(5, Decimal("0"), [tier("Silver", 10)]) is None


class CommissionAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role=User.Role.ADMIN
        )
        agent_user = User.objects.create_user(
            email="agent@example.com", password="pass12345", role=User.Role.AGENT
        )
        self.agent = Agent.objects.create(user=agent_user, business_name="Samburu Ways")
        self.client.force_authenticate(self.admin)

    def test_tier_crud_writes_audit_rows(self) -> None:
        response = self.client.post(
            reverse("commission-tier-list"),
            {"name": "Silver", "min_bookings": 10, "commission_rate": "8.50"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pk = response.data["id"]

        response = self.client.patch(
            reverse("commission-tier-detail", args=[pk]), {"commission_rate": "7.50"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(reverse("commission-tier-list"))
        self.assertEqual([t["name"] for t in response.data["tiers"]], ["Silver"])

        response = self.client.delete(reverse("commission-tier-detail", args=[pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        actions = list(AuditLog.objects.order_by("pk").values_list("action", flat=True))
        self.assertEqual(
            actions,
            ["commission_tier_created", "commission_tier_updated", "commission_tier_deleted"],
        )
        update = AuditLog.objects.get(action="commission_tier_updated")
        self.assertEqual(update.metadata["changes"]["commission_rate"], {"from": "8.50", "to": "7.50"})

    def test_tier_rate_above_100_is_invalid(self) -> None:
        response = self.client.post(
            reverse("commission-tier-list"),
            {"name": "Broken", "min_bookings": 1, "commission_rate": "120"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_agent_commission_get_and_patch(self) -> None:
        url = reverse("admin-agent-commission", args=[self.agent.pk])
        response = self.client.get(url)
        self.assertEqual(response.data["commission_rate"], Decimal("10.00"))

        response = self.client.patch(url, {"commission_rate": "12.00", "reason": "Volume review"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["previous_rate"], Decimal("10.00"))
        self.assertEqual(response.data["new_rate"], Decimal("12.00"))
        self.agent.refresh_from_db()
        self.assertEqual(self.agent.commission_rate, Decimal("12.00"))
        self.assertTrue(AuditLog.objects.filter(action="commission_rate_updated").exists())

    def test_agent_commission_out_of_range(self) -> None:
        url = reverse("admin-agent-commission", args=[self.agent.pk])
        response = self.client.patch(url, {"commission_rate": "55"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
