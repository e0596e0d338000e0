"""Notification services for in-app messages and e-mail."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


def notify(
    user: "CustomUser",
    type: str,
    title: str,
    message: str,
    link: str = "",
) -> Notification:
    """Create an in-app notification for ``user``."""
    notification = Notification.objects.create(
        user=user,
        type=type,
        title=title,
        message=message,
        link=link,
    )
    logger.info(f"In-app notification created for {user.email}: {title}")
    return notification


def queue_email(recipient: str, subject: str, message: str) -> None:
    """Hand an e-mail to the Celery worker."""
    from .tasks import send_email_task

    send_email_task.delay(recipient, subject, message)
