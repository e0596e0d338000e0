"""Contact form intake."""

from __future__ import annotations

import logging
from typing import Any, Optional

from django.conf import settings  # type: ignore

from apps.notifications.services import queue_email
from shared.application.side_effects import best_effort

from .models import ContactMessage

logger = logging.getLogger(__name__)


def submit_contact_message(data: dict[str, Any], ip_address: Optional[str] = None) -> ContactMessage:
    """Store the message and forward a copy to the admin inbox."""
    contact = ContactMessage.objects.create(ip_address=ip_address, **data)
    logger.info(f"Contact message {contact.pk} received from {contact.email}")
    best_effort(
        queue_email,
        settings.ADMIN_EMAIL,
        f"[SafariPlus Contact] {contact.subject}",
        f"From: {contact.name} <{contact.email}>\n"
        f"Phone: {contact.phone or '-'}\n\n"
        f"{contact.message}",
        description="contact form email",
    )
    return contact
