"""Models for the review domain.

Defines the ``Review`` entity representing feedback and ratings submitted
by travelers for tours they have completed. Each booking can carry at most
one review. ``ReviewHelpful`` records which users found a review helpful;
``Review.helpful_count`` always equals the number of those rows.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Review(models.Model):
    """Represents a review left by a traveler for a tour."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews'
    )
    tour = models.ForeignKey(
        'tours.Tour', on_delete=models.CASCADE, related_name='reviews'
    )
    booking = models.OneToOneField(
        'bookings.Booking',
        on_delete=models.CASCADE,
        related_name='review',
        help_text=_('Booking the review belongs to'),
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text='Rating from 1 to 5'
    )
    title = models.CharField(max_length=100, blank=True)
    content = models.TextField()
    is_verified = models.BooleanField(default=False, help_text=_('Written by a traveler who booked'))
    is_approved = models.BooleanField(default=True, help_text=_('Visible to the public'))
    helpful_count = models.PositiveIntegerField(default=0)

    agent_response = models.TextField(blank=True)
    agent_response_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('user', 'tour', 'booking')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['tour', '-created_at']),
            models.Index(fields=['user']),
            models.Index(fields=['rating']),
        ]

    def __str__(self) -> str:
        return f"Review by {self.user_id} for tour {self.tour_id} (Rating: {self.rating})"


class ReviewHelpful(models.Model):
    """A user's helpful vote on a review."""

    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name='helpful_votes')
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='helpful_votes'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['review', 'user'], name='unique_helpful_vote'),
        ]

    def __str__(self) -> str:
        return f"Helpful vote by {self.user_id} on review {self.review_id}"
