"""API views for agent payouts and commission management."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.audit.services import record_audit
from apps.users.models import Agent
from apps.users.permissions import IsAdmin, IsAgent, get_agent_profile
from shared.infrastructure.pagination import PageLimitPagination

from .filters import AdminWithdrawalFilterSet, WithdrawalFilterSet
from .models import CommissionTier, WithdrawalRequest
from .serializers import (
    ApproveWithdrawalSerializer,
    CommissionRateSerializer,
    CommissionTierSerializer,
    ProcessWithdrawalSerializer,
    RejectWithdrawalSerializer,
    WithdrawalCreateSerializer,
    WithdrawalSerializer,
)
from .services import (
    agent_balance,
    agent_tier,
    approve_withdrawal,
    ensure_can_withdraw,
    process_withdrawal,
    reject_withdrawal,
    request_withdrawal,
    update_commission_rate,
)

logger = logging.getLogger(__name__)


class WithdrawalPagination(PageLimitPagination):
    results_key = "withdrawals"


class AgentBalanceView(APIView):
    """GET /api/v1/agent/balance/ - earnings and withdrawal totals."""

    permission_classes = [IsAgent]

    def get(self, request):  # type: ignore
        agent = get_agent_profile(request.user)
        tier = agent_tier(agent)
        return Response(
            {
                "balance": agent_balance(agent),
                "commission_rate": agent.commission_rate,
                "tier": CommissionTierSerializer(tier).data if tier else None,
            }
        )


class AgentWithdrawalViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """The caller's own withdrawal history and new requests."""

    serializer_class = WithdrawalSerializer
    permission_classes = [IsAgent]
    pagination_class = WithdrawalPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = WithdrawalFilterSet

    def get_queryset(self):  # type: ignore
        agent = get_agent_profile(self.request.user)
        return WithdrawalRequest.objects.select_related("agent", "agent__user").filter(agent=agent)

    def create(self, request, *args, **kwargs):  # type: ignore
        agent = get_agent_profile(request.user)
        ensure_can_withdraw(agent)
        serializer = WithdrawalCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = request_withdrawal(agent, serializer.validated_data)
        return Response(
            {
                "withdrawal": WithdrawalSerializer(withdrawal).data,
                "message": "Withdrawal request submitted successfully",
            },
            status=status.HTTP_201_CREATED,
        )


class AdminWithdrawalViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Withdrawal review queue.

    - GET /api/v1/admin/withdrawals/ - all requests (status, agent, method)
    - GET /api/v1/admin/withdrawals/pending/ - requests awaiting a decision
    - POST /api/v1/admin/withdrawals/{id}/approve/
    - POST /api/v1/admin/withdrawals/{id}/process/
    - POST /api/v1/admin/withdrawals/{id}/reject/
    """

    queryset = WithdrawalRequest.objects.select_related("agent", "agent__user").all()
    serializer_class = WithdrawalSerializer
    permission_classes = [IsAdmin]
    pagination_class = WithdrawalPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminWithdrawalFilterSet
    lookup_value_regex = r"\d+"

    @action(detail=False, methods=["get"])
    def pending(self, request):  # type: ignore
        queryset = self.get_queryset().filter(status=WithdrawalRequest.Status.PENDING).order_by("created_at")
        serializer = self.get_serializer(queryset, many=True)
        return Response({"withdrawals": serializer.data, "count": len(serializer.data)})

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        serializer = ApproveWithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = approve_withdrawal(pk, request.user, serializer.validated_data["notes"], request=request)
        return Response({"withdrawal": self.get_serializer(withdrawal).data, "message": "Withdrawal approved"})

    @action(detail=True, methods=["post"])
    def process(self, request, pk=None):  # type: ignore
        serializer = ProcessWithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = process_withdrawal(
            pk,
            request.user,
            serializer.validated_data["transaction_ref"],
            serializer.validated_data["notes"],
            request=request,
        )
        return Response({"withdrawal": self.get_serializer(withdrawal).data, "message": "Withdrawal completed"})

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        serializer = RejectWithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = reject_withdrawal(pk, request.user, serializer.validated_data["reason"], request=request)
        return Response({"withdrawal": self.get_serializer(withdrawal).data, "message": "Withdrawal rejected"})


class CommissionTierViewSet(viewsets.ModelViewSet):
    """CRUD for commission tiers. Each mutation writes an audit row."""

    queryset = CommissionTier.objects.all()
    serializer_class = CommissionTierSerializer
    permission_classes = [IsAdmin]
    pagination_class = None

    def list(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"tiers": serializer.data})

    def perform_create(self, serializer):  # type: ignore
        with transaction.atomic():
            tier = serializer.save()
            record_audit(
                self.request.user,
                "commission_tier_created",
                "commission_tier",
                tier.pk,
                {"name": tier.name, "commission_rate": str(tier.commission_rate)},
                request=self.request,
            )

    def perform_update(self, serializer):  # type: ignore
        previous = CommissionTierSerializer(serializer.instance).data
        with transaction.atomic():
            tier = serializer.save()
            current = CommissionTierSerializer(tier).data
            changes = {
                field: {"from": previous[field], "to": current[field]}
                for field in serializer.validated_data
                if previous[field] != current[field]
            }
            record_audit(
                self.request.user,
                "commission_tier_updated",
                "commission_tier",
                tier.pk,
                {"name": tier.name, "changes": changes},
                request=self.request,
            )

    def perform_destroy(self, instance):  # type: ignore
        with transaction.atomic():
            record_audit(
                self.request.user,
                "commission_tier_deleted",
                "commission_tier",
                instance.pk,
                {"name": instance.name},
                request=self.request,
            )
            instance.delete()


class AgentCommissionView(APIView):
    """GET/PATCH /api/v1/admin/agents/{id}/commission/"""

    permission_classes = [IsAdmin]

    def get(self, request, pk):  # type: ignore
        agent = get_object_or_404(Agent.objects.select_related("user"), pk=pk)
        return Response(
            {
                "agent_id": agent.pk,
                "business_name": agent.business_name,
                "commission_rate": agent.commission_rate,
            }
        )

    def patch(self, request, pk):  # type: ignore
        agent = get_object_or_404(Agent.objects.select_related("user"), pk=pk)
        serializer = CommissionRateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_rate = serializer.validated_data["commission_rate"]
        previous = update_commission_rate(
            agent,
            new_rate,
            request.user,
            serializer.validated_data["reason"],
            request=request,
        )
        return Response(
            {
                "agent_id": agent.pk,
                "previous_rate": previous,
                "new_rate": new_rate,
                "message": "Commission rate updated",
            }
        )
