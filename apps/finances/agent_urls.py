"""Agent-facing payout routes mounted under ``/api/v1/agent/``."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AgentBalanceView, AgentWithdrawalViewSet

router = DefaultRouter()
router.register(r'withdrawals', AgentWithdrawalViewSet, basename='agent-withdrawal')

urlpatterns = [
    path('balance/', AgentBalanceView.as_view(), name='agent-balance'),
    path('', include(router.urls)),
]
