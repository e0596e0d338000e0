"""Serializers for authentication flows (register, login)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR, Agent

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Sign-up for travelers and tour operators."""

    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True)
    password_confirm = serializers.CharField(min_length=8, write_only=True)
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])
    role = serializers.ChoiceField(
        choices=[User.Role.CLIENT, User.Role.AGENT],
        default=User.Role.CLIENT,
    )
    business_name = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("password") != attrs.get("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "Passwords do not match."})
        if User.objects.filter(email__iexact=attrs["email"]).exists():
            raise serializers.ValidationError({"email": "A user with this e-mail already exists."})
        if attrs.get("role") == User.Role.AGENT and not attrs.get("business_name"):
            raise serializers.ValidationError({"business_name": "Business name is required for agents."})
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        validated_data.pop("password_confirm", None)
        business_name = validated_data.pop("business_name", "")
        password = validated_data.pop("password")
        if not validated_data.get("phone"):
            validated_data.pop("phone", None)
        user = User.objects.create_user(password=password, **validated_data)
        if user.role == User.Role.AGENT:
            Agent.objects.create(user=user, business_name=business_name, phone=user.phone or "")
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            user = User.objects.get(email__iexact=attrs.get("email", ""))
        except User.DoesNotExist:
            raise serializers.ValidationError({"email": "Invalid e-mail or password."})

        if not user.is_active or not user.check_password(attrs.get("password", "")):
            raise serializers.ValidationError({"email": "Invalid e-mail or password."})

        attrs["user"] = user
        return attrs
