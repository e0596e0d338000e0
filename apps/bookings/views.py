"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.audit.services import apply_tracked_changes, record_audit
from apps.users.permissions import IsAdmin, IsAgent, IsClient, get_agent_profile
from shared.infrastructure.pagination import PageLimitPagination

from .filters import AdminBookingFilterSet, BookingFilterSet
from .models import Booking
from .serializers import AdminBookingUpdateSerializer, BookingCreateSerializer, BookingSerializer
from .services import create_booking, status_counts

logger = logging.getLogger(__name__)


class BookingPagination(PageLimitPagination):
    results_key = "bookings"


class BookingViewSet(mixins.CreateModelMixin, mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """The calling traveler's bookings."""

    permission_classes = [IsClient]
    pagination_class = BookingPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        return Booking.objects.select_related("tour", "agent").filter(user=self.request.user)

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        booking = create_booking(request.user, data.pop("tour"), data)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class AgentBookingViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Bookings placed on the calling agent's tours."""

    serializer_class = BookingSerializer
    permission_classes = [IsAgent]
    pagination_class = BookingPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        agent = get_agent_profile(self.request.user)
        return Booking.objects.select_related("tour", "agent").filter(agent=agent)


class AdminBookingViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Admin booking console.

    - GET /api/v1/admin/bookings/ - filters status, payment_status, search;
      paginated with page/limit and per-status counts
    - PATCH /api/v1/admin/bookings/{id}/ - set status and/or featured
    """

    queryset = Booking.objects.select_related("tour", "agent", "user").all()
    serializer_class = BookingSerializer
    permission_classes = [IsAdmin]
    pagination_class = BookingPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AdminBookingFilterSet

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.paginator.get_paginated_response(
            serializer.data,
            status_counts=status_counts(Booking.objects.all()),
        )

    def partial_update(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = AdminBookingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            changes = apply_tracked_changes(booking, serializer.validated_data)
            booking.save()
            record_audit(
                request.user,
                "booking_updated",
                "booking",
                booking.pk,
                {"booking_reference": booking.booking_reference, "changes": changes},
                request=request,
            )
        logger.info(f"Booking {booking.booking_reference} updated by admin {request.user.pk}: {changes}")
        return Response({"booking": self.get_serializer(booking).data})
