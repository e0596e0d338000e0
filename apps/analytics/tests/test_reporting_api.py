"""Tests for top agents, platform statistics and the admin dashboard."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics.services import (
    FALLBACK_PLATFORM_STATS,
    AgentPerformance,
    platform_stats,
    platform_stats_cache,
    rank_top_agents,
)
from apps.bookings.models import Booking
from apps.reviews.models import Review
from apps.tours.models import Tour
from apps.users.models import Agent, User
from shared.infrastructure.cache import TTLCache


def row(pk: int, revenue: float) -> AgentPerformance:
    return AgentPerformance(id=pk, name=f"Agent {pk}", revenue=revenue, bookings=1, rating=0)


def test_rank_top_agents_excludes_zero_and_keeps_ties_stable():
    rows = [row(1, 30), row(2, 0), row(3, 50), row(4, 30), row(5, 10)]
    ranked = rank_top_agents(rows, limit=4)
    assert [r.id for r in ranked] == [3, 1, 4, 5]


def test_rank_top_agents_truncates():
    assert [r.id for r in rank_top_agents([row(1, 5), row(2, 7)], limit=1)] == [2]


class ReportingTestBase(APITestCase):
    def setUp(self) -> None:
        platform_stats_cache.invalidate()
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role=User.Role.ADMIN
        )
        self.traveler = User.objects.create_user(
            email="traveler@example.com", password="pass12345", role=User.Role.CLIENT
        )

    def make_agent(self, name: str) -> tuple[Agent, Tour]:
        user = User.objects.create_user(
            email=f"{name.lower()}@example.com", password="pass12345", role=User.Role.AGENT
        )
        agent = Agent.objects.create(
            user=user, business_name=name, is_verified=True, status=Agent.Status.ACTIVE
        )
        tour = Tour.objects.create(
            agent=agent,
            title=f"{name} Safari",
            destination="Amboseli",
            duration_days=2,
            base_price=Decimal("100.00"),
            status=Tour.Status.ACTIVE,
        )
        return agent, tour

    def book(self, agent: Agent, tour: Tour, earnings: str, booking_status: str) -> Booking:
        start = date.today() + timedelta(days=5)
        return Booking.objects.create(
            user=self.traveler,
            tour=tour,
            agent=agent,
            start_date=start,
            end_date=start + timedelta(days=1),
            contact_name="Jane",
            contact_email="traveler@example.com",
            contact_phone="+254712345678",
            total_amount=Decimal(earnings),
            agent_earnings=Decimal(earnings),
            status=booking_status,
            payment_status=Booking.PaymentStatus.COMPLETED,
        )


class TopAgentsAPITests(ReportingTestBase):
    def setUp(self) -> None:
        super().setUp()
        self.agent_a, self.tour_a = self.make_agent("Alpha")
        self.agent_b, self.tour_b = self.make_agent("Bravo")
        for earnings in ("10", "20", "5"):
            self.book(self.agent_a, self.tour_a, earnings, Booking.Status.CONFIRMED)
        completed = self.book(self.agent_b, self.tour_b, "50", Booking.Status.COMPLETED)
        Review.objects.create(
            user=self.traveler, tour=self.tour_b, booking=completed,
            rating=5, content="Wonderful guides", is_approved=True,
        )
        self.client.force_authenticate(self.admin)

    def test_limit_one_returns_highest_earner(self) -> None:
        response = self.client.get(reverse("admin-top-agents"), {"limit": 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["agents"],
            [{"id": self.agent_b.pk, "name": "Bravo", "revenue": 50.0, "bookings": 1, "rating": 5.0}],
        )

    def test_zero_revenue_and_cancelled_bookings_are_excluded(self) -> None:
        idle, tour = self.make_agent("Idle")
        self.book(idle, tour, "999", Booking.Status.CANCELLED)
        response = self.client.get(reverse("admin-top-agents"))
        ids = [item["id"] for item in response.data["agents"]]
        self.assertEqual(ids, [self.agent_b.pk, self.agent_a.pk])
        self.assertEqual(response.data["agents"][1]["revenue"], 35.0)
        self.assertEqual(response.data["agents"][1]["rating"], 0)

    def test_unverified_agents_are_excluded(self) -> None:
        self.agent_b.unverify()
        response = self.client.get(reverse("admin-top-agents"))
        self.assertEqual([item["id"] for item in response.data["agents"]], [self.agent_a.pk])

    def test_invalid_limit_is_400(self) -> None:
        for value in ("abc", "0"):
            response = self.client.get(reverse("admin-top-agents"), {"limit": value})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(self.traveler)
        response = self.client.get(reverse("admin-top-agents"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PlatformStatsAPITests(ReportingTestBase):
    def test_public_stats_with_cache_header(self) -> None:
        agent, tour = self.make_agent("Alpha")
        self.book(agent, tour, "100", Booking.Status.PAID)

        response = self.client.get(reverse("platform-stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Cache-Control"], "public, s-maxage=300, stale-while-revalidate=60")
        self.assertEqual(response.data["total_bookings"], 1)
        self.assertEqual(response.data["verified_operators"], 1)
        self.assertEqual(response.data["average_rating"], 4.8)
        self.assertEqual(response.data["active_tours"], 1)
        self.assertIn("last_updated", response.data)

    def test_second_call_is_served_from_cache(self) -> None:
        first = self.client.get(reverse("platform-stats"))
        self.make_agent("Late")
        second = self.client.get(reverse("platform-stats"))
        self.assertEqual(second.data, first.data)

        platform_stats_cache.invalidate()
        third = self.client.get(reverse("platform-stats"))
        self.assertEqual(third.data["verified_operators"], 1)

    def test_aggregate_failure_serves_uncached_fallback(self) -> None:
        with mock.patch(
            "apps.analytics.services.compute_platform_stats",
            side_effect=RuntimeError("database unavailable"),
        ) as compute:
            response = self.client.get(reverse("platform-stats"))
        compute.assert_called_once_with()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for key, value in FALLBACK_PLATFORM_STATS.items():
            self.assertEqual(response.data[key], value)
        self.assertIn("last_updated", response.data)
        self.assertIsNone(platform_stats_cache.get())

        retried = self.client.get(reverse("platform-stats"))
        self.assertEqual(retried.data["total_bookings"], 0)
        self.assertIsNotNone(platform_stats_cache.get())

    def test_injected_clock_expires_cache(self) -> None:
        now = [0.0]
        cache = TTLCache(ttl=300, clock=lambda: now[0])
        first = platform_stats(cache)
        self.make_agent("Later")
        now[0] = 299.0
        self.assertEqual(platform_stats(cache)["verified_operators"], first["verified_operators"])
        now[0] = 300.0
        self.assertEqual(platform_stats(cache)["verified_operators"], first["verified_operators"] + 1)


class AdminDashboardAPITests(ReportingTestBase):
    def test_overview_counts(self) -> None:
        agent, tour = self.make_agent("Alpha")
        self.book(agent, tour, "100", Booking.Status.COMPLETED)
        self.client.force_authenticate(self.admin)

        response = self.client.get(reverse("admin-dashboard"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["users"]["total"], 3)
        self.assertEqual(response.data["agents"]["total"], 1)
        self.assertEqual(response.data["bookings"]["by_status"]["COMPLETED"], 1)
        self.assertEqual(response.data["revenue"]["total"], Decimal("100"))
