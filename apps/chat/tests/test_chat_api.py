"""Tests for conversations, messages and realtime channel authorization."""

from __future__ import annotations

from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.chat.models import Conversation, ConversationParticipant, Message
from apps.chat.services import ChatError, get_conversation_for
from apps.users.models import Agent, User
from shared.infrastructure.realtime import reset_realtime_client


class ChatTestBase(APITestCase):
    def setUp(self) -> None:
        self.traveler = User.objects.create_user(
            email="traveler@example.com", password="pass12345", role=User.Role.CLIENT, name="Jane"
        )
        self.stranger = User.objects.create_user(
            email="stranger@example.com", password="pass12345", role=User.Role.CLIENT
        )
        agent_user = User.objects.create_user(
            email="agent@example.com", password="pass12345", role=User.Role.AGENT
        )
        self.agent = Agent.objects.create(user=agent_user, business_name="Rift Valley Tours")
        self.conversation = Conversation.objects.create(subject="Dates")
        ConversationParticipant.objects.create(conversation=self.conversation, user=self.traveler)
        ConversationParticipant.objects.create(conversation=self.conversation, user=agent_user)

        patcher = mock.patch("apps.chat.services.trigger")
        self.trigger = patcher.start()
        self.addCleanup(patcher.stop)


class ConversationAPITests(ChatTestBase):
    def test_list_only_own_conversations(self) -> None:
        self.client.force_authenticate(self.stranger)
        response = self.client.get(reverse("conversation-list"))
        self.assertEqual(response.data["pagination"]["total"], 0)

        self.client.force_authenticate(self.traveler)
        response = self.client.get(reverse("conversation-list"))
        self.assertEqual(response.data["pagination"]["total"], 1)
        self.assertEqual(
            response.data["conversations"][0]["channel_name"],
            f"private-conversation-{self.conversation.pk}",
        )

    def test_start_conversation_is_reused(self) -> None:
        self.client.force_authenticate(self.stranger)
        payload = {"agent": self.agent.pk, "message": "Do you run trips to Lake Nakuru?"}
        first = self.client.post(reverse("conversation-list"), payload, format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        second = self.client.post(reverse("conversation-list"), {"agent": self.agent.pk}, format="json")
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["conversation"]["id"], second.data["conversation"]["id"])
        self.assertEqual(Message.objects.filter(sender=self.stranger).count(), 1)

    def test_cannot_message_yourself(self) -> None:
        self.client.force_authenticate(self.agent.user)
        response = self.client.post(reverse("conversation-list"), {"agent": self.agent.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_post_message_triggers_realtime_event(self) -> None:
        self.client.force_authenticate(self.traveler)
        url = reverse("conversation-messages", args=[self.conversation.pk])
        response = self.client.post(url, {"content": "Is there space on the 12th?"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        channel, event, payload = self.trigger.call_args.args
        self.assertEqual(channel, f"private-conversation-{self.conversation.pk}")
        self.assertEqual(event, "new-message")
        self.assertEqual(payload["content"], "Is there space on the 12th?")

        agent_membership = ConversationParticipant.objects.get(user=self.agent.user)
        self.assertEqual(agent_membership.unread_count, 1)

        self.client.force_authenticate(self.agent.user)
        listing = self.client.get(url)
        self.assertEqual(len(listing.data["messages"]), 1)
        agent_membership.refresh_from_db()
        self.assertEqual(agent_membership.unread_count, 0)

    def test_realtime_failure_does_not_fail_post(self) -> None:
        self.trigger.side_effect = ConnectionError("pusher down")
        self.client.force_authenticate(self.traveler)
        url = reverse("conversation-messages", args=[self.conversation.pk])
        response = self.client.post(url, {"content": "Hello?"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Message.objects.count(), 1)

    def test_non_participant_gets_403(self) -> None:
        self.client.force_authenticate(self.stranger)
        url = reverse("conversation-messages", args=[self.conversation.pk])
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(url, {"content": "Let me in"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_non_numeric_conversation_id_is_404(self) -> None:
        self.client.force_authenticate(self.traveler)
        response = self.client.get("/api/v1/messages/conversations/abc/messages/")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_lookup_rejects_non_numeric_id(self) -> None:
        with self.assertRaises(ChatError) as ctx:
            get_conversation_for(self.traveler, "abc")
        self.assertEqual(ctx.exception.status_code, status.HTTP_404_NOT_FOUND)


class RealtimeAuthAPITests(ChatTestBase):
    def setUp(self) -> None:
        super().setUp()
        reset_realtime_client()
        self.addCleanup(reset_realtime_client)

    def auth(self, channel_name: str, socket_id: str = "123.456"):
        return self.client.post(
            reverse("realtime-auth"),
            {"socket_id": socket_id, "channel_name": channel_name},
            format="json",
        )

    def test_participant_can_join_conversation_channel(self) -> None:
        self.client.force_authenticate(self.traveler)
        response = self.auth(f"private-conversation-{self.conversation.pk}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(list(response.data), ["auth"])
        key, signature = response.data["auth"].split(":")
        self.assertEqual(key, "test-key")
        self.assertRegex(signature, r"^[0-9a-f]{64}$")

    def test_non_participant_is_forbidden(self) -> None:
        self.client.force_authenticate(self.stranger)
        with mock.patch("apps.chat.services.authenticate_channel") as authenticate:
            response = self.auth(f"private-conversation-{self.conversation.pk}")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        authenticate.assert_not_called()

    def test_user_channel_must_match_caller(self) -> None:
        self.client.force_authenticate(self.traveler)
        response = self.auth(f"private-user-{self.traveler.pk}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["auth"].startswith("test-key:"))
        self.assertEqual(
            self.auth(f"private-user-{self.stranger.pk}").status_code, status.HTTP_403_FORBIDDEN
        )

    def test_unknown_prefix_is_400(self) -> None:
        self.client.force_authenticate(self.traveler)
        self.assertEqual(self.auth("presence-lobby").status_code, status.HTTP_400_BAD_REQUEST)

    def test_malformed_socket_id_is_400(self) -> None:
        self.client.force_authenticate(self.traveler)
        response = self.auth(f"private-user-{self.traveler.pk}", socket_id="garbage")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("socket_id", response.data["details"])

    def test_missing_fields_is_400(self) -> None:
        self.client.force_authenticate(self.traveler)
        response = self.client.post(reverse("realtime-auth"), {"channel_name": "private-user-1"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anonymous_is_401(self) -> None:
        response = self.auth(f"private-user-{self.traveler.pk}")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
