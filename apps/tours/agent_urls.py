from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AgentTourViewSet

router = DefaultRouter()
router.register(r"tours", AgentTourViewSet, basename="agent-tour")

urlpatterns = [
    path("", include(router.urls)),
]
