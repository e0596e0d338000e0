"""Public URL declarations for the tours app."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import TourViewSet

router = DefaultRouter()
router.register(r"", TourViewSet, basename="tour")

urlpatterns = [
    path("", include(router.urls)),
]
