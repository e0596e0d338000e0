"""Serializers for reviews.

The creating user is inferred from the request in the view; the tour comes
from the reviewed booking.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.bot_protection import BotProtectedSerializerMixin

from .models import Review


class ReviewCreateSerializer(BotProtectedSerializerMixin, serializers.Serializer):
    """Serializer for creating a new review."""

    booking = serializers.IntegerField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    content = serializers.CharField(min_length=10, max_length=2000)


class ReviewSerializer(serializers.ModelSerializer):
    """Read serializer for reviews including related ids."""

    user_id = serializers.ReadOnlyField(source='user.id')
    user_name = serializers.ReadOnlyField(source='user.display_name')
    tour_id = serializers.ReadOnlyField(source='tour.id')
    tour_title = serializers.ReadOnlyField(source='tour.title')
    booking_reference = serializers.ReadOnlyField(source='booking.booking_reference')

    class Meta:
        model = Review
        fields = [
            'id',
            'user_id',
            'user_name',
            'tour_id',
            'tour_title',
            'booking_reference',
            'rating',
            'title',
            'content',
            'is_verified',
            'is_approved',
            'helpful_count',
            'agent_response',
            'agent_response_at',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class AgentResponseSerializer(serializers.Serializer):
    response = serializers.CharField(max_length=2000)


class AdminReviewUpdateSerializer(serializers.Serializer):
    is_approved = serializers.BooleanField()
