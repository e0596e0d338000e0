"""Admin API views for tour operator accounts."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.audit.services import record_audit
from shared.infrastructure.pagination import PageLimitPagination

from .filters import AgentFilterSet
from .models import Agent
from .permissions import IsAdmin
from .serializers import AgentSerializer

logger = logging.getLogger(__name__)


class AgentPagination(PageLimitPagination):
    results_key = "agents"


class AdminAgentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Agent administration.

    Endpoints:
    - GET /api/v1/admin/agents/ - list agents (status, verified, search)
    - GET /api/v1/admin/agents/pending/ - unverified agents
    - GET /api/v1/admin/agents/{id}/ - agent details
    - POST|PATCH /api/v1/admin/agents/{id}/verify/ - mark verified and active
    - POST|PATCH /api/v1/admin/agents/{id}/unverify/ - clear verification
    """

    queryset = Agent.objects.select_related("user").all()
    serializer_class = AgentSerializer
    permission_classes = [IsAdmin]
    pagination_class = AgentPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AgentFilterSet
    lookup_value_regex = r"\d+"

    @action(detail=False, methods=["get"])
    def pending(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset()).filter(is_verified=False)
        serializer = self.get_serializer(queryset, many=True)
        return Response({"agents": serializer.data, "count": len(serializer.data)})

    @action(detail=True, methods=["post", "patch"])
    def verify(self, request, pk=None):  # type: ignore
        agent = self.get_object()
        with transaction.atomic():
            agent.verify()
            record_audit(
                request.user,
                "agent_verified",
                "agent",
                agent.pk,
                {"agent_name": agent.business_name, "agent_email": agent.user.email},
                request=request,
            )
        logger.info(f"Agent {agent.pk} verified by admin {request.user.pk}")
        return Response({"agent": self.get_serializer(agent).data})

    @action(detail=True, methods=["post", "patch"])
    def unverify(self, request, pk=None):  # type: ignore
        agent = self.get_object()
        with transaction.atomic():
            agent.unverify()
            record_audit(
                request.user,
                "agent_unverified",
                "agent",
                agent.pk,
                {"agent_name": agent.business_name, "agent_email": agent.user.email},
                request=request,
            )
        logger.info(f"Agent {agent.pk} unverified by admin {request.user.pk}")
        return Response({"agent": self.get_serializer(agent).data})
