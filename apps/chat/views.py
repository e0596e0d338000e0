"""API views for conversations and realtime channel authorization."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.infrastructure.pagination import PageLimitPagination

from .models import Conversation
from .serializers import (
    ConversationCreateSerializer,
    ConversationSerializer,
    MessageCreateSerializer,
    MessageSerializer,
    RealtimeAuthSerializer,
)
from .services import (
    authorize_channel,
    get_conversation_for,
    mark_conversation_read,
    post_message,
    start_conversation,
)


class ConversationPagination(PageLimitPagination):
    page_size = 20
    results_key = "conversations"


class MessagePagination(PageLimitPagination):
    page_size = 50
    results_key = "messages"


class ConversationViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    The caller's conversations.

    - GET/POST /api/v1/messages/conversations/
    - GET/POST /api/v1/messages/conversations/{id}/messages/ - participants only
    """

    serializer_class = ConversationSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = ConversationPagination
    lookup_value_regex = r"\d+"

    def get_queryset(self):  # type: ignore
        return (
            Conversation.objects.filter(participants__user=self.request.user)
            .prefetch_related("participants__user")
            .distinct()
        )

    def get_object(self):  # type: ignore
        return get_conversation_for(self.request.user, self.kwargs["pk"])

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        conversation, created = start_conversation(request.user, serializer.validated_data)
        return Response(
            {"conversation": self.get_serializer(conversation).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @action(detail=True, methods=["get", "post"], pagination_class=MessagePagination)
    def messages(self, request, pk=None):  # type: ignore
        conversation = self.get_object()
        if request.method == "POST":
            serializer = MessageCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            message = post_message(conversation, request.user, serializer.validated_data["content"])
            return Response({"message": MessageSerializer(message).data}, status=status.HTTP_201_CREATED)

        mark_conversation_read(conversation, request.user)
        page = self.paginate_queryset(conversation.messages.select_related("sender"))
        return self.get_paginated_response(MessageSerializer(page, many=True).data)


class RealtimeAuthView(APIView):
    """POST /api/v1/messages/realtime/auth/ - sign a private channel subscription."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, format=None):  # type: ignore
        serializer = RealtimeAuthSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        signature = authorize_channel(
            request.user,
            serializer.validated_data["channel_name"],
            serializer.validated_data["socket_id"],
        )
        return Response(signature)
