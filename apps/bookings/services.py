"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.db import transaction  # type: ignore
from django.db.models import Count  # type: ignore
from rest_framework import status  # type: ignore

from apps.tours.models import Tour
from shared.infrastructure.exceptions import ServiceError

from .models import Booking

logger = logging.getLogger(__name__)

WHOLE_UNIT = Decimal("1")
CENTS = Decimal("0.01")


class BookingError(ServiceError):
    """Raised when a booking cannot be created or changed."""


def calculate_commission(total_amount, commission_rate) -> tuple[Decimal, Decimal]:
    """
    Split ``total_amount`` into ``(platform_commission, agent_earnings)``.

    The commission is ``total * rate / 100`` rounded half-up to a whole
    currency unit; the agent keeps the remainder.
    """
    total = Decimal(str(total_amount))
    rate = Decimal(str(commission_rate))
    commission = (total * rate / Decimal("100")).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
    return commission, total - commission


def price_booking(tour: Tour, adults: int, children: int) -> Decimal:
    total = tour.base_price * adults + tour.effective_child_price * children
    return Decimal(total).quantize(CENTS)


def create_booking(user, tour_id: Any, data: dict[str, Any]) -> Booking:
    """
    Create a PENDING booking for ``user`` on an ACTIVE tour.

    Totals are computed from the tour price; client-supplied amounts are
    never trusted.
    """
    try:
        tour = Tour.objects.select_related("agent").get(pk=tour_id)
    except (Tour.DoesNotExist, ValueError, TypeError):
        raise BookingError("Tour not found", status_code=status.HTTP_404_NOT_FOUND)

    if tour.status != Tour.Status.ACTIVE:
        raise BookingError("Tour is not available for booking")

    adults = data["adults"]
    children = data.get("children", 0)
    if adults + children > tour.max_group_size:
        raise BookingError(f"Group size exceeds the maximum of {tour.max_group_size} travelers")

    start_date = data["start_date"]
    end_date = data.get("end_date") or start_date + timedelta(days=max(tour.duration_days - 1, 0))
    if end_date < start_date:
        raise BookingError("End date cannot be before the start date")

    total = price_booking(tour, adults, children)
    commission, earnings = calculate_commission(total, tour.agent.commission_rate)

    with transaction.atomic():
        booking = Booking.objects.create(
            user=user,
            tour=tour,
            agent=tour.agent,
            start_date=start_date,
            end_date=end_date,
            adults=adults,
            children=children,
            base_amount=total,
            total_amount=total,
            platform_commission=commission,
            agent_earnings=earnings,
            contact_name=data["contact_name"],
            contact_email=data["contact_email"],
            contact_phone=data["contact_phone"],
            special_requests=data.get("special_requests", ""),
        )
    logger.info(
        f"Booking {booking.booking_reference} created for tour {tour.pk}: "
        f"total={total} commission={commission}"
    )
    return booking


def status_counts(queryset) -> dict[str, int]:
    """Number of bookings per status, with every status present."""
    counts = {choice: 0 for choice in Booking.Status.values}
    for row in queryset.order_by().values("status").annotate(total=Count("id")):
        counts[row["status"]] = row["total"]
    return counts
