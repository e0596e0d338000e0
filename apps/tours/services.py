"""Tour helpers used by the views."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from django.db.models import Avg, Count, F, ProtectedError, Q  # type: ignore

from shared.infrastructure.exceptions import ServiceError

from .models import Tour


class TourError(ServiceError):
    default_message = "Tour operation failed."


def increment_view_count(tour_id: int) -> None:
    Tour.objects.filter(pk=tour_id).update(view_count=F("view_count") + 1)


def delete_tour(tour: Tour) -> None:
    """Delete ``tour``; bookings protect it from removal."""
    try:
        with transaction.atomic():
            tour.delete()
    except ProtectedError:
        raise TourError("Tour has bookings and cannot be deleted")


def with_rating_summary(queryset):
    """Annotate ``average_rating``/``review_count`` over approved reviews."""
    approved = Q(reviews__is_approved=True)
    return queryset.annotate(
        average_rating=Avg("reviews__rating", filter=approved),
        review_count=Count("reviews", filter=approved),
    )
