"""Serializers for the tour catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Tour

AGENT_SETTABLE_STATUSES = [
    Tour.Status.DRAFT,
    Tour.Status.PENDING_REVIEW,
    Tour.Status.PAUSED,
    Tour.Status.ARCHIVED,
]


class TourSerializer(serializers.ModelSerializer):
    """Read representation used by the public and admin endpoints."""

    agent = serializers.SerializerMethodField()
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()

    class Meta:
        model = Tour
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "destination",
            "tour_type",
            "duration_days",
            "base_price",
            "child_price",
            "max_group_size",
            "status",
            "featured",
            "view_count",
            "agent",
            "average_rating",
            "review_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_agent(self, obj: Tour) -> dict:
        return {
            "id": obj.agent_id,
            "business_name": obj.agent.business_name,
            "is_verified": obj.agent.is_verified,
        }

    def get_average_rating(self, obj: Tour) -> float:
        value = getattr(obj, "average_rating", None)
        return round(float(value), 1) if value is not None else 0

    def get_review_count(self, obj: Tour) -> int:
        return getattr(obj, "review_count", 0) or 0


class TourWriteSerializer(serializers.ModelSerializer):
    """Agent catalog create/update."""

    status = serializers.ChoiceField(choices=AGENT_SETTABLE_STATUSES, required=False)

    class Meta:
        model = Tour
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "destination",
            "tour_type",
            "duration_days",
            "base_price",
            "child_price",
            "max_group_size",
            "status",
        ]
        read_only_fields = ["id", "slug"]


class AdminTourUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Tour.Status.choices, required=False)
    featured = serializers.BooleanField(required=False)
