"""
Reporting queries.

Every figure is aggregated on request from bookings, agents, reviews and
withdrawals. The public platform statistics are the only numbers kept in
process, inside a ``TTLCache``.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from django.conf import settings  # type: ignore
from django.db.models import Avg, Count, Q, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.finances.models import WithdrawalRequest
from apps.finances.services import month_start
from apps.reviews.models import Review
from apps.tours.models import Tour
from apps.users.models import Agent, CustomUser
from shared.infrastructure.cache import TTLCache

logger = logging.getLogger(__name__)

EARNING_STATUSES = (
    Booking.Status.CONFIRMED,
    Booking.Status.PAID,
    Booking.Status.IN_PROGRESS,
    Booking.Status.COMPLETED,
)
DEFAULT_AVERAGE_RATING = 4.8
FALLBACK_PLATFORM_STATS = {
    "total_bookings": 100,
    "verified_operators": 20,
    "average_rating": 4.8,
    "total_paid_to_agents": 50000,
    "active_tours": 50,
}

platform_stats_cache: TTLCache[dict[str, Any]] = TTLCache(ttl=settings.PLATFORM_STATS_CACHE_TTL)


@dataclass(frozen=True)
class AgentPerformance:
    id: int
    name: str
    revenue: float
    bookings: int
    rating: float


def rank_top_agents(rows: Iterable[AgentPerformance], limit: int) -> list[AgentPerformance]:
    """
    Drop zero-revenue rows, order by revenue descending and keep ``limit``.

    Rows with equal revenue keep their input order.
    """
    earning = [row for row in rows if row.revenue > 0]
    return sorted(earning, key=lambda row: row.revenue, reverse=True)[:limit]


def top_agents(limit: int = 5, now=None) -> list[dict[str, Any]]:
    """Verified active agents ranked by this month's earnings."""
    this_month = Q(
        bookings__created_at__gte=month_start(now),
        bookings__status__in=EARNING_STATUSES,
    )
    agents = (
        Agent.objects.filter(is_verified=True, status=Agent.Status.ACTIVE)
        .annotate(
            revenue=Sum("bookings__agent_earnings", filter=this_month),
            booking_count=Count("bookings", filter=this_month),
        )
        .order_by("pk")
    )
    agents = list(agents)

    ratings = dict(
        Review.objects.filter(tour__agent__in=[agent.pk for agent in agents], is_approved=True)
        .order_by()
        .values("tour__agent")
        .annotate(avg=Avg("rating"))
        .values_list("tour__agent", "avg")
    )

    rows = [
        AgentPerformance(
            id=agent.pk,
            name=agent.business_name,
            revenue=float(agent.revenue or 0),
            bookings=agent.booking_count,
            rating=round(float(ratings[agent.pk]), 1) if ratings.get(agent.pk) is not None else 0,
        )
        for agent in agents
    ]
    return [asdict(row) for row in rank_top_agents(rows, limit)]


def compute_platform_stats() -> dict[str, Any]:
    """Run the five public aggregates."""
    total_bookings = Booking.objects.filter(
        status__in=[
            Booking.Status.CONFIRMED,
            Booking.Status.COMPLETED,
            Booking.Status.PAID,
            Booking.Status.IN_PROGRESS,
        ]
    ).count()
    verified_operators = Agent.objects.filter(is_verified=True, status=Agent.Status.ACTIVE).count()
    average = Review.objects.filter(is_approved=True).aggregate(avg=Avg("rating"))["avg"]
    paid_out = WithdrawalRequest.objects.filter(
        status=WithdrawalRequest.Status.COMPLETED
    ).aggregate(total=Sum("amount"))["total"]
    active_tours = Tour.objects.filter(status=Tour.Status.ACTIVE).count()

    return {
        "total_bookings": total_bookings,
        "verified_operators": verified_operators,
        "average_rating": round(float(average), 1) if average is not None else DEFAULT_AVERAGE_RATING,
        "total_paid_to_agents": float(paid_out or Decimal("0")),
        "active_tours": active_tours,
        "last_updated": timezone.now().isoformat(),
    }


def platform_stats(cache: Optional[TTLCache] = None) -> dict[str, Any]:
    """
    Cached platform statistics.

    When an aggregate fails the fallback figures are returned with a fresh
    timestamp and nothing is cached, so the next call retries.
    """
    cache = cache or platform_stats_cache
    try:
        return cache.get_or_load(compute_platform_stats)
    except Exception as exc:  # noqa: BLE001
        logger.error(f"Platform stats aggregation failed, serving fallback: {exc}", exc_info=True)
        return {**FALLBACK_PLATFORM_STATS, "last_updated": timezone.now().isoformat()}


def dashboard_overview() -> dict[str, Any]:
    bookings_by_status = dict(
        Booking.objects.order_by().values("status").annotate(count=Count("id")).values_list("status", "count")
    )
    paid = Booking.objects.filter(payment_status=Booking.PaymentStatus.COMPLETED).aggregate(
        revenue=Sum("total_amount"),
        commission=Sum("platform_commission"),
    )
    outstanding = WithdrawalRequest.objects.filter(status=WithdrawalRequest.Status.PENDING).aggregate(
        count=Count("id"),
        amount=Sum("amount"),
    )
    return {
        "users": {
            "total": CustomUser.objects.count(),
            "clients": CustomUser.objects.filter(role=CustomUser.Role.CLIENT).count(),
        },
        "agents": {
            "total": Agent.objects.count(),
            "pending": Agent.objects.filter(is_verified=False).count(),
            "active": Agent.objects.filter(status=Agent.Status.ACTIVE).count(),
        },
        "tours": {
            "total": Tour.objects.count(),
            "active": Tour.objects.filter(status=Tour.Status.ACTIVE).count(),
        },
        "bookings": {
            "total": sum(bookings_by_status.values()),
            "by_status": {choice: bookings_by_status.get(choice, 0) for choice in Booking.Status.values},
        },
        "revenue": {
            "total": paid["revenue"] or Decimal("0"),
            "platform_commission": paid["commission"] or Decimal("0"),
        },
        "withdrawals": {
            "pending_count": outstanding["count"],
            "pending_amount": outstanding["amount"] or Decimal("0"),
        },
    }
