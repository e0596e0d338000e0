"""Serializers for conversations and messages."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Conversation, Message


class MessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.ReadOnlyField(source="sender.display_name")

    class Meta:
        model = Message
        fields = ["id", "conversation", "sender", "sender_name", "content", "created_at"]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=5000, trim_whitespace=True)


class ConversationSerializer(serializers.ModelSerializer):
    participants = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()
    channel_name = serializers.ReadOnlyField()

    class Meta:
        model = Conversation
        fields = [
            "id",
            "subject",
            "booking",
            "tour",
            "participants",
            "unread_count",
            "channel_name",
            "last_message_at",
            "last_message_preview",
            "created_at",
        ]
        read_only_fields = fields

    def get_participants(self, obj: Conversation) -> list[dict]:
        return [
            {"id": p.user_id, "name": p.user.display_name, "role": p.user.role}
            for p in obj.participants.all()
        ]

    def get_unread_count(self, obj: Conversation) -> int:
        request = self.context.get("request")
        if request is None:
            return 0
        for participant in obj.participants.all():
            if participant.user_id == request.user.pk:
                return participant.unread_count
        return 0


class ConversationCreateSerializer(serializers.Serializer):
    agent = serializers.IntegerField()
    booking = serializers.IntegerField(required=False, allow_null=True)
    tour = serializers.IntegerField(required=False, allow_null=True)
    subject = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    message = serializers.CharField(max_length=5000, required=False, allow_blank=True)


class RealtimeAuthSerializer(serializers.Serializer):
    socket_id = serializers.RegexField(r"^\d+\.\d+$")
    channel_name = serializers.CharField()
