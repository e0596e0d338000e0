"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a traveler. Amounts are computed server-side."""

    tour = serializers.IntegerField()
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    adults = serializers.IntegerField(min_value=1)
    children = serializers.IntegerField(min_value=0, default=0)
    contact_name = serializers.CharField(max_length=255)
    contact_email = serializers.EmailField()
    contact_phone = serializers.CharField(max_length=20)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation."""

    user_id = serializers.ReadOnlyField(source="user.id")
    tour_id = serializers.ReadOnlyField(source="tour.id")
    tour_title = serializers.ReadOnlyField(source="tour.title")
    tour_slug = serializers.ReadOnlyField(source="tour.slug")
    agent_id = serializers.ReadOnlyField(source="agent.id")
    agent_name = serializers.ReadOnlyField(source="agent.business_name")

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_reference",
            "user_id",
            "tour_id",
            "tour_title",
            "tour_slug",
            "agent_id",
            "agent_name",
            "start_date",
            "end_date",
            "adults",
            "children",
            "base_amount",
            "total_amount",
            "platform_commission",
            "agent_earnings",
            "contact_name",
            "contact_email",
            "contact_phone",
            "special_requests",
            "status",
            "payment_status",
            "featured",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AdminBookingUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)
    featured = serializers.BooleanField(required=False)
