"""Admin reporting routes mounted under ``/api/v1/admin/``."""

from django.urls import path  # type: ignore

from .views import AdminDashboardView, TopAgentsView

urlpatterns = [
    path('agents/top/', TopAgentsView.as_view(), name='admin-top-agents'),
    path('dashboard/', AdminDashboardView.as_view(), name='admin-dashboard'),
]
