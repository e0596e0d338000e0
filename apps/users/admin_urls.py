"""Admin URL declarations for the users app."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AdminAgentViewSet

router = DefaultRouter()
router.register(r"agents", AdminAgentViewSet, basename="admin-agent")

urlpatterns = [
    path("", include(router.urls)),
]
