"""API views for reporting."""

from __future__ import annotations

from rest_framework import permissions, serializers  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsAdmin

from .services import dashboard_overview, platform_stats, top_agents

PLATFORM_STATS_CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=60"


class TopAgentsQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=50, default=5)


class TopAgentsView(APIView):
    """GET /api/v1/admin/agents/top/?limit=5"""

    permission_classes = [IsAdmin]

    def get(self, request, format=None):  # type: ignore
        query = TopAgentsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response({"agents": top_agents(query.validated_data["limit"])})


class PlatformStatsView(APIView):
    """Public marketing figures, cached in process."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request, format=None):  # type: ignore
        response = Response(platform_stats())
        response["Cache-Control"] = PLATFORM_STATS_CACHE_CONTROL
        return response


class AdminDashboardView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request, format=None):  # type: ignore
        return Response(dashboard_overview())
