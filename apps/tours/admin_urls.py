from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AdminTourViewSet

router = DefaultRouter()
router.register(r"tours", AdminTourViewSet, basename="admin-tour")

urlpatterns = [
    path("", include(router.urls)),
]
