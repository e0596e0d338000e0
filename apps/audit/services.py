"""Writing audit rows."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request) -> Optional[str]:
    """First ``X-Forwarded-For`` entry, else ``REMOTE_ADDR``."""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR")


def record_audit(
    user,
    action: str,
    resource: str,
    resource_id: Any,
    metadata: Optional[dict[str, Any]] = None,
    request=None,
) -> AuditLog:
    entry = AuditLog(
        user=user if getattr(user, "is_authenticated", False) else None,
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else "",
        metadata=metadata or {},
    )
    if request is not None:
        entry.ip_address = get_client_ip(request)
        entry.user_agent = request.META.get("HTTP_USER_AGENT", "")
    entry.save()
    logger.info(f"Audit: {action} on {resource} {resource_id} by user {entry.user_id}")
    return entry


def apply_tracked_changes(instance, values: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """
    Assign ``values`` onto ``instance`` and return the diff.

    Only keys present in ``values`` are written. The diff maps each changed
    field to ``{"from": old, "to": new}``; unchanged fields are left out.
    The caller saves the instance.
    """
    changes: dict[str, dict[str, Any]] = {}
    for field, new_value in values.items():
        old_value = getattr(instance, field)
        if old_value != new_value:
            changes[field] = {"from": old_value, "to": new_value}
        setattr(instance, field, new_value)
    return changes
