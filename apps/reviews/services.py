"""Review workflows: submission, helpful votes and agent responses."""

from __future__ import annotations

import logging
from typing import Any

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import status  # type: ignore

from apps.bookings.models import Booking
from shared.infrastructure.exceptions import ServiceError

from .models import Review, ReviewHelpful

logger = logging.getLogger(__name__)

HELPFUL_ADDED = "added"
HELPFUL_REMOVED = "removed"


class ReviewError(ServiceError):
    """Raised when a review operation breaks a business rule."""


def submit_review(user, data: dict[str, Any]) -> Review:
    try:
        booking = Booking.objects.select_related("tour").get(pk=data["booking"])
    except Booking.DoesNotExist:
        raise ReviewError("Booking not found", status_code=status.HTTP_404_NOT_FOUND)

    if booking.user_id != user.pk:
        raise ReviewError("You can only review your own bookings", status_code=status.HTTP_403_FORBIDDEN)
    if booking.status != Booking.Status.COMPLETED:
        raise ReviewError("Only completed bookings can be reviewed")
    if Review.objects.filter(booking=booking).exists():
        raise ReviewError("You have already reviewed this booking")

    review = Review.objects.create(
        user=user,
        tour=booking.tour,
        booking=booking,
        rating=data["rating"],
        title=data.get("title", ""),
        content=data["content"],
        is_verified=True,
        is_approved=True,
    )
    logger.info(f"Review {review.pk} submitted for tour {booking.tour_id} by user {user.pk}")
    return review


def toggle_helpful(review_id: Any, user) -> tuple[str, Review]:
    """
    Add the caller's helpful vote, or remove it when already present.

    The vote row and the counter change commit together.
    """
    try:
        review = Review.objects.get(pk=review_id)
    except (Review.DoesNotExist, ValueError, TypeError):
        raise ReviewError("Review not found", status_code=status.HTTP_404_NOT_FOUND)

    if review.user_id == user.pk:
        raise ReviewError("You cannot mark your own review as helpful")

    with transaction.atomic():
        deleted, _ = ReviewHelpful.objects.filter(review=review, user=user).delete()
        if deleted:
            Review.objects.filter(pk=review.pk).update(helpful_count=F("helpful_count") - 1)
            action = HELPFUL_REMOVED
        else:
            action = HELPFUL_ADDED
            try:
                with transaction.atomic():
                    ReviewHelpful.objects.create(review=review, user=user)
            except IntegrityError:
                logger.info(f"Helpful vote on review {review.pk} by user {user.pk} already recorded")
            else:
                Review.objects.filter(pk=review.pk).update(helpful_count=F("helpful_count") + 1)

    review.refresh_from_db(fields=["helpful_count"])
    return action, review


def respond_to_review(user, review: Review, response: str) -> Review:
    if review.tour.agent.user_id != user.pk:
        raise ReviewError(
            "Only the tour operator can respond to this review",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    if review.agent_response:
        raise ReviewError("This review already has a response")

    review.agent_response = response
    review.agent_response_at = timezone.now()
    review.save(update_fields=["agent_response", "agent_response_at", "updated_at"])
    return review
