"""
Conversation workflows and realtime channel authorization.

Private channels follow two naming schemes: ``private-conversation-<id>``
for a thread (participants only) and ``private-user-<id>`` for a user's
own notification feed.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import status  # type: ignore

from apps.bookings.models import Booking
from apps.tours.models import Tour
from apps.users.models import Agent
from shared.application.side_effects import best_effort
from shared.infrastructure.exceptions import ServiceError
from shared.infrastructure.realtime import authenticate_channel, trigger

from .models import Conversation, ConversationParticipant, Message

logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "new-message"
CONVERSATION_CHANNEL_RE = re.compile(r"^private-conversation-(\d+)$")
USER_CHANNEL_RE = re.compile(r"^private-user-(\d+)$")


class ChatError(ServiceError):
    """Raised when a conversation operation is not allowed."""


def get_conversation_for(user, conversation_id: Any) -> Conversation:
    """Return the conversation, 404 when missing and 403 for non-participants."""
    try:
        conversation = Conversation.objects.get(pk=conversation_id)
    except (Conversation.DoesNotExist, ValueError, TypeError):
        raise ChatError("Conversation not found", status_code=status.HTTP_404_NOT_FOUND)
    if not conversation.has_participant(user):
        raise ChatError(
            "You are not a participant in this conversation",
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return conversation


def start_conversation(user, data: dict[str, Any]) -> tuple[Conversation, bool]:
    """
    Open a thread between ``user`` and an agent, reusing an existing one
    with the same booking or tour context. Returns ``(conversation, created)``.
    """
    try:
        agent = Agent.objects.select_related("user").get(pk=data["agent"])
    except Agent.DoesNotExist:
        raise ChatError("Agent not found", status_code=status.HTTP_404_NOT_FOUND)
    if agent.user_id == user.pk:
        raise ChatError("You cannot start a conversation with yourself")

    booking: Optional[Booking] = None
    if data.get("booking"):
        booking = Booking.objects.filter(pk=data["booking"], user=user, agent=agent).first()
        if booking is None:
            raise ChatError("Booking not found", status_code=status.HTTP_404_NOT_FOUND)
    tour: Optional[Tour] = None
    if data.get("tour"):
        tour = Tour.objects.filter(pk=data["tour"], agent=agent).first()
        if tour is None:
            raise ChatError("Tour not found", status_code=status.HTTP_404_NOT_FOUND)

    existing = (
        Conversation.objects.filter(participants__user=user, booking=booking, tour=tour)
        .filter(participants__user=agent.user)
        .first()
    )
    if existing is not None:
        conversation, created = existing, False
    else:
        with transaction.atomic():
            conversation = Conversation.objects.create(
                booking=booking,
                tour=tour,
                subject=data.get("subject", ""),
            )
            ConversationParticipant.objects.bulk_create(
                [
                    ConversationParticipant(conversation=conversation, user=user),
                    ConversationParticipant(conversation=conversation, user=agent.user),
                ]
            )
        created = True
        logger.info(f"Conversation {conversation.pk} opened by user {user.pk} with agent {agent.pk}")

    if data.get("message"):
        post_message(conversation, user, data["message"])
    return conversation, created


def post_message(conversation: Conversation, sender, content: str) -> Message:
    message = Message.objects.create(conversation=conversation, sender=sender, content=content)
    best_effort(
        trigger,
        conversation.channel_name,
        NEW_MESSAGE_EVENT,
        {
            "id": message.pk,
            "conversation_id": conversation.pk,
            "sender_id": sender.pk,
            "sender_name": sender.display_name,
            "content": message.content,
            "created_at": message.created_at.isoformat(),
        },
        description="realtime new-message",
    )
    return message


def mark_conversation_read(conversation: Conversation, user) -> None:
    conversation.participants.filter(user_id=user.pk).update(unread_count=0, last_read_at=timezone.now())


def authorize_channel(user, channel_name: str, socket_id: str) -> dict[str, Any]:
    """Sign a private channel subscription for ``user``."""
    match = CONVERSATION_CHANNEL_RE.match(channel_name)
    if match:
        allowed = ConversationParticipant.objects.filter(
            conversation_id=int(match.group(1)), user_id=user.pk
        ).exists()
    else:
        match = USER_CHANNEL_RE.match(channel_name)
        if not match:
            raise ChatError("Invalid channel name")
        allowed = int(match.group(1)) == user.pk

    if not allowed:
        logger.warning(f"User {user.pk} denied subscription to {channel_name}")
        raise ChatError("Not authorized for this channel", status_code=status.HTTP_403_FORBIDDEN)
    return authenticate_channel(channel_name, socket_id)
