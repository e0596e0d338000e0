from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AgentBookingViewSet

router = DefaultRouter()
router.register(r"bookings", AgentBookingViewSet, basename="agent-booking")

urlpatterns = [
    path("", include(router.urls)),
]
