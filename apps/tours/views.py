"""Tour API views."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.audit.services import apply_tracked_changes, record_audit
from apps.users.permissions import IsAdmin, IsAgent, get_agent_profile
from shared.application.side_effects import best_effort
from shared.infrastructure.pagination import PageLimitPagination

from .filters import AdminTourFilterSet, TourFilterSet
from .models import Tour
from .serializers import AdminTourUpdateSerializer, TourSerializer, TourWriteSerializer
from .services import delete_tour, increment_view_count, with_rating_summary

logger = logging.getLogger(__name__)

FEATURED_TOURS_LIMIT = 6


class TourPagination(PageLimitPagination):
    page_size = 12
    results_key = "tours"


class TourViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Public catalog.

    - GET /api/v1/tours/ - active tours with filters
    - GET /api/v1/tours/{slug}/ - active tour detail, bumps the view counter
    - GET /api/v1/tours/featured/ - up to six featured tours
    """

    serializer_class = TourSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = TourPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = TourFilterSet
    lookup_field = "slug"

    def get_queryset(self):  # type: ignore
        qs = Tour.objects.select_related("agent").filter(status=Tour.Status.ACTIVE)
        return with_rating_summary(qs).order_by("-featured", "-created_at")

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        tour = self.get_object()
        best_effort(increment_view_count, tour.pk, description="tour view count")
        return Response(self.get_serializer(tour).data)

    @action(detail=False, methods=["get"])
    def featured(self, request):  # type: ignore
        queryset = self.get_queryset().filter(featured=True)[:FEATURED_TOURS_LIMIT]
        return Response({"tours": self.get_serializer(queryset, many=True).data})


class AgentTourViewSet(viewsets.ModelViewSet):
    """The calling agent's own catalog."""

    permission_classes = [IsAgent]
    pagination_class = TourPagination

    def get_queryset(self):  # type: ignore
        agent = get_agent_profile(self.request.user)
        return with_rating_summary(Tour.objects.select_related("agent").filter(agent=agent))

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return TourWriteSerializer
        return TourSerializer

    def perform_create(self, serializer):  # type: ignore
        agent = get_agent_profile(self.request.user)
        tour = serializer.save(agent=agent)
        logger.info(f"Agent {agent.pk} created tour {tour.pk}")

    def perform_destroy(self, instance):  # type: ignore
        tour_id = instance.pk
        delete_tour(instance)
        logger.info(f"Agent tour {tour_id} deleted")


class AdminTourViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Tour moderation.

    PATCH writes ``status`` and/or ``featured`` when present and records an
    audit row with the diff. Any status may follow any other.
    """

    serializer_class = TourSerializer
    permission_classes = [IsAdmin]
    pagination_class = PageLimitPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminTourFilterSet

    def get_queryset(self):  # type: ignore
        return with_rating_summary(Tour.objects.select_related("agent"))

    def partial_update(self, request, pk=None):  # type: ignore
        tour = self.get_object()
        serializer = AdminTourUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            changes = apply_tracked_changes(tour, serializer.validated_data)
            tour.save()
            record_audit(
                request.user,
                "tour_updated",
                "tour",
                tour.pk,
                {"title": tour.title, "changes": changes},
                request=request,
            )
        logger.info(f"Tour {tour.pk} updated by admin {request.user.pk}: {changes}")
        return Response({"tour": self.get_serializer(self.get_object()).data})

    def destroy(self, request, pk=None):  # type: ignore
        tour = self.get_object()
        with transaction.atomic():
            record_audit(
                request.user,
                "tour_deleted",
                "tour",
                tour.pk,
                {"title": tour.title, "agent_id": tour.agent_id},
                request=request,
            )
            delete_tour(tour)
        return Response(status=status.HTTP_204_NO_CONTENT)
