"""Admin finance routes mounted under ``/api/v1/admin/``."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AdminWithdrawalViewSet, AgentCommissionView, CommissionTierViewSet

router = DefaultRouter()
router.register(r'withdrawals', AdminWithdrawalViewSet, basename='admin-withdrawal')
router.register(r'commission-tiers', CommissionTierViewSet, basename='commission-tier')

urlpatterns = [
    path('agents/<int:pk>/commission/', AgentCommissionView.as_view(), name='admin-agent-commission'),
    path('', include(router.urls)),
]
