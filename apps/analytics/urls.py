"""Public statistics routes mounted under ``/api/v1/stats/``."""

from django.urls import path  # type: ignore

from .views import PlatformStatsView

urlpatterns = [
    path('platform/', PlatformStatsView.as_view(), name='platform-stats'),
]
