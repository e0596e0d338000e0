"""Role-based permission classes shared by every app."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore

from .models import Agent, CustomUser


class HasRole(permissions.BasePermission):
    """
    Allow authenticated users whose ``role`` is one of ``roles``.

    Anonymous callers fail the check; DRF answers 401 because JWT
    authentication supplies a ``WWW-Authenticate`` header. Authenticated
    callers with another role get 403.
    """

    roles: tuple[str, ...] = ()

    def __init__(self, *roles: str):
        if roles:
            self.roles = roles

    def __call__(self):
        # DRF instantiates each entry of ``permission_classes``.
        return self

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) in self.roles


IsAdmin = HasRole(CustomUser.Role.ADMIN)
IsAgent = HasRole(CustomUser.Role.AGENT)
IsClient = HasRole(CustomUser.Role.CLIENT)


def get_agent_profile(user) -> Agent:
    """Return the caller's agent profile or raise 404."""
    try:
        return Agent.objects.get(user=user)
    except Agent.DoesNotExist:
        raise NotFound("Agent not found")
