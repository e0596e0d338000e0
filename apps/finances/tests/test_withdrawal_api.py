"""Integration tests for agent balances and the withdrawal workflow."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLog
from apps.bookings.models import Booking
from apps.finances.models import WithdrawalRequest
from apps.notifications.models import Notification
from apps.tours.models import Tour
from apps.users.models import Agent, User


class PayoutTestBase(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role=User.Role.ADMIN
        )
        self.traveler = User.objects.create_user(
            email="traveler@example.com", password="pass12345", role=User.Role.CLIENT
        )
        agent_user = User.objects.create_user(
            email="agent@example.com", password="pass12345", role=User.Role.AGENT
        )
        self.agent = Agent.objects.create(
            user=agent_user,
            business_name="Tsavo Trails",
            is_verified=True,
            status=Agent.Status.ACTIVE,
        )
        self.tour = Tour.objects.create(
            agent=self.agent,
            title="Tsavo Explorer",
            destination="Tsavo",
            duration_days=3,
            base_price=Decimal("250.00"),
            status=Tour.Status.ACTIVE,
        )
        self.add_booking("500.00")

    def add_booking(self, earnings: str, **overrides) -> Booking:
        start = date.today() + timedelta(days=10)
        fields = {
            "user": self.traveler,
            "tour": self.tour,
            "agent": self.agent,
            "start_date": start,
            "end_date": start + timedelta(days=2),
            "contact_name": "Jane",
            "contact_email": "traveler@example.com",
            "contact_phone": "+254712345678",
            "total_amount": Decimal(earnings) * 2,
            "agent_earnings": Decimal(earnings),
            "status": Booking.Status.COMPLETED,
            "payment_status": Booking.PaymentStatus.COMPLETED,
        }
        fields.update(overrides)
        return Booking.objects.create(**fields)

    def mpesa_payload(self, amount: str = "100.00") -> dict:
        return {"amount": amount, "method": "mpesa", "mpesa_phone": "0712345678"}


class AgentWithdrawalTests(PayoutTestBase):
    def setUp(self) -> None:
        super().setUp()
        self.client.force_authenticate(self.agent.user)

    def test_balance_reflects_bookings_and_withdrawals(self) -> None:
        self.add_booking("80.00", payment_status=Booking.PaymentStatus.PENDING)
        self.add_booking("40.00", status=Booking.Status.CONFIRMED)
        WithdrawalRequest.objects.create(
            agent=self.agent, amount=Decimal("100.00"), method="mpesa",
            status=WithdrawalRequest.Status.COMPLETED,
        )
        WithdrawalRequest.objects.create(agent=self.agent, amount=Decimal("60.00"), method="mpesa")

        response = self.client.get(reverse("agent-balance"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        balance = response.data["balance"]
        self.assertEqual(balance["total_earnings"], Decimal("540.00"))
        self.assertEqual(balance["total_withdrawn"], Decimal("100.00"))
        self.assertEqual(balance["pending_withdrawals"], Decimal("60.00"))
        self.assertEqual(balance["available_balance"], Decimal("380.00"))
        self.assertEqual(balance["pending_earnings"], Decimal("40.00"))
        self.assertEqual(balance["completed_bookings"], 2)

    def test_request_mpesa_withdrawal(self) -> None:
        response = self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["withdrawal"]["status"], "PENDING")

        listing = self.client.get(reverse("agent-withdrawal-list"), {"status": "PENDING"})
        self.assertEqual(listing.data["pagination"]["total"], 1)

    def test_inactive_agent_gets_403(self) -> None:
        self.agent.status = Agent.Status.SUSPENDED
        self.agent.save()
        response = self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_below_minimum_is_rejected(self) -> None:
        response = self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload("20.00"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Minimum withdrawal", response.data["error"])

    @override_settings(PAYOUT_DEV_MODE=True)
    def test_dev_mode_allows_one_unit(self) -> None:
        response = self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload("1.00"), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_cannot_exceed_available_balance(self) -> None:
        response = self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload("500.01"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Insufficient balance", response.data["error"])

    def test_second_open_request_is_rejected(self) -> None:
        self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload(), format="json")
        response = self.client.post(reverse("agent-withdrawal-list"), self.mpesa_payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(WithdrawalRequest.objects.count(), 1)

    def test_invalid_mpesa_phone(self) -> None:
        payload = self.mpesa_payload()
        payload["mpesa_phone"] = "0812345678"
        response = self.client.post(reverse("agent-withdrawal-list"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("mpesa_phone", response.data["details"])

    def test_bank_method_requires_details(self) -> None:
        response = self.client.post(
            reverse("agent-withdrawal-list"), {"amount": "100.00", "method": "bank"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            reverse("agent-withdrawal-list"),
            {
                "amount": "100.00",
                "method": "bank",
                "bank_details": {
                    "bank_name": "KCB",
                    "account_number": "1234567890",
                    "account_name": "Tsavo Trails Ltd",
                },
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["withdrawal"]["bank_details"]["bank_name"], "KCB")


class AdminWithdrawalTests(PayoutTestBase):
    def setUp(self) -> None:
        super().setUp()
        self.withdrawal = WithdrawalRequest.objects.create(
            agent=self.agent, amount=Decimal("200.00"), method="mpesa", mpesa_phone="0712345678"
        )
        self.client.force_authenticate(self.admin)

    def test_agent_cannot_use_admin_queue(self) -> None:
        self.client.force_authenticate(self.agent.user)
        response = self.client.get(reverse("admin-withdrawal-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_pending_queue(self) -> None:
        response = self.client.get(reverse("admin-withdrawal-pending"))
        self.assertEqual(response.data["count"], 1)

    def test_approve_then_process(self) -> None:
        response = self.client.post(reverse("admin-withdrawal-approve", args=[self.withdrawal.pk]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["withdrawal"]["status"], "APPROVED")

        response = self.client.post(reverse("admin-withdrawal-process", args=[self.withdrawal.pk]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            reverse("admin-withdrawal-process", args=[self.withdrawal.pk]),
            {"transaction_ref": "QK12ABC345"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.withdrawal.refresh_from_db()
        self.assertEqual(self.withdrawal.status, WithdrawalRequest.Status.COMPLETED)
        self.assertEqual(self.withdrawal.processed_by, self.admin)

        actions = list(AuditLog.objects.order_by("pk").values_list("action", flat=True))
        self.assertEqual(actions, ["withdrawal_approved", "withdrawal_processed"])
        self.assertEqual(Notification.objects.filter(user=self.agent.user).count(), 2)
        self.assertEqual(len(mail.outbox), 2)

    def test_approve_rechecks_balance(self) -> None:
        self.withdrawal.amount = Decimal("600.00")
        self.withdrawal.save()
        response = self.client.post(reverse("admin-withdrawal-approve", args=[self.withdrawal.pk]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(AuditLog.objects.exists())

    def test_reject_requires_reason_length(self) -> None:
        url = reverse("admin-withdrawal-reject", args=[self.withdrawal.pk])
        response = self.client.post(url, {"reason": "too short"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(url, {"reason": "Phone number does not match the account"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.withdrawal.refresh_from_db()
        self.assertEqual(self.withdrawal.status, WithdrawalRequest.Status.REJECTED)

        response = self.client.post(reverse("admin-withdrawal-approve", args=[self.withdrawal.pk]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_withdrawal_is_404(self) -> None:
        response = self.client.post(reverse("admin-withdrawal-approve", args=[999]), {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Withdrawal not found")

    def test_notification_failure_does_not_fail_decision(self) -> None:
        with mock.patch("apps.finances.services.notify", side_effect=RuntimeError("down")):
            response = self.client.post(
                reverse("admin-withdrawal-approve", args=[self.withdrawal.pk]), {}, format="json"
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(AuditLog.objects.filter(action="withdrawal_approved").exists())
