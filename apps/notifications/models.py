"""Notification model.

Defines a simple notification entity delivered to users in the web
interface. Notifications are created by domain services (payout
decisions, new messages, new bookings) and consumed by recipients. Each
notification can be marked as read.
"""

from __future__ import annotations

from django.db import models  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Type(models.TextChoices):
        BOOKING = 'BOOKING', 'Booking'
        PAYMENT = 'PAYMENT', 'Payment'
        WITHDRAWAL = 'WITHDRAWAL', 'Withdrawal'
        MESSAGE = 'MESSAGE', 'Message'
        REVIEW = 'REVIEW', 'Review'
        SYSTEM = 'SYSTEM', 'System'

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.SYSTEM)
    title = models.CharField(max_length=255)
    message = models.TextField()
    link = models.CharField(max_length=255, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read']),
        ]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
