"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import Agent

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Public view of an account."""

    class Meta:
        model = User
        fields = ["id", "email", "name", "phone", "role", "created_at"]
        read_only_fields = ["id", "role", "created_at"]


class AgentSerializer(serializers.ModelSerializer):
    """Agent profile with the owning account inlined."""

    user = UserSerializer(read_only=True)

    class Meta:
        model = Agent
        fields = [
            "id",
            "user",
            "business_name",
            "description",
            "phone",
            "website",
            "commission_rate",
            "is_verified",
            "verified_at",
            "status",
            "created_at",
        ]
        read_only_fields = fields
