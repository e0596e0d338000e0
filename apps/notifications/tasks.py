"""Celery tasks for outbound e-mail."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_email")
def send_email_task(recipient: str, subject: str, message: str) -> int:
    """Send a plain-text e-mail. Returns the number of messages delivered."""
    sent = send_mail(
        subject=subject,
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[recipient],
        fail_silently=False,
    )
    logger.info(f"Email sent to {recipient}: {subject}")
    return sent
