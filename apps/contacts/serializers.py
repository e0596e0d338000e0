from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.infrastructure.bot_protection import BotProtectedSerializerMixin

from .models import ContactMessage


class ContactMessageCreateSerializer(BotProtectedSerializerMixin, serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    subject = serializers.CharField(min_length=5, max_length=200)
    message = serializers.CharField(min_length=10, max_length=5000)


class ContactMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactMessage
        fields = ["id", "name", "email", "phone", "subject", "message", "status", "created_at", "updated_at"]
        read_only_fields = [f for f in fields if f != "status"]


class ContactStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ContactMessage.Status.choices)
