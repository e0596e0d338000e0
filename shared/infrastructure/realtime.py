"""
Hosted pub/sub (Pusher Channels) client.

The client is built lazily from settings the first time it is needed and
reused for the lifetime of the process.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import pusher  # type: ignore
from django.conf import settings  # type: ignore

logger = logging.getLogger(__name__)

_client: Optional[pusher.Pusher] = None


def get_realtime_client() -> pusher.Pusher:
    global _client
    if _client is None:
        _client = pusher.Pusher(
            app_id=settings.PUSHER_APP_ID,
            key=settings.PUSHER_KEY,
            secret=settings.PUSHER_SECRET,
            cluster=settings.PUSHER_CLUSTER,
            ssl=True,
        )
        logger.info("Realtime client initialised")
    return _client


def reset_realtime_client() -> None:
    """Drop the cached client so the next call rebuilds it from settings."""
    global _client
    _client = None


def trigger(channel: str, event: str, payload: dict[str, Any]) -> None:
    get_realtime_client().trigger(channel, event, payload)


def authenticate_channel(channel_name: str, socket_id: str) -> dict[str, Any]:
    return get_realtime_client().authenticate(channel=channel_name, socket_id=socket_id)
