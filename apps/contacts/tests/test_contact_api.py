"""Tests for the public contact form and the admin inbox."""

from __future__ import annotations

from unittest import mock

from django.core import mail
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLog
from apps.contacts.models import ContactMessage
from apps.users.models import User


@override_settings(ADMIN_EMAIL="inbox@safariplus.test")
class ContactFormTests(APITestCase):
    def payload(self, **overrides) -> dict:
        data = {
            "name": "Wanjiru",
            "email": "wanjiru@example.com",
            "subject": "Group booking",
            "message": "We are twelve people looking at the Mara in August.",
            "lt": 8000,
        }
        data.update(overrides)
        return data

    def test_submission_is_stored_and_forwarded(self) -> None:
        response = self.client.post(reverse("contact"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        contact = ContactMessage.objects.get()
        self.assertEqual(contact.status, ContactMessage.Status.NEW)
        self.assertEqual(mail.outbox[0].to, ["inbox@safariplus.test"])
        self.assertIn("Group booking", mail.outbox[0].subject)

    def test_honeypot_rejects_submission(self) -> None:
        response = self.client.post(reverse("contact"), self.payload(hp="http://spam"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(ContactMessage.objects.exists())

    def test_too_fast_rejects_submission(self) -> None:
        response = self.client.post(reverse("contact"), self.payload(lt=900), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_field_lengths(self) -> None:
        for field, value in (("name", "W"), ("subject", "Hi"), ("message", "Too short")):
            response = self.client.post(reverse("contact"), self.payload(**{field: value}), format="json")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertIn(field, response.data["details"])

    def test_email_failure_does_not_fail_submission(self) -> None:
        with mock.patch("apps.contacts.services.queue_email", side_effect=ConnectionError("smtp down")):
            response = self.client.post(reverse("contact"), self.payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(ContactMessage.objects.count(), 1)


class AdminContactTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role=User.Role.ADMIN
        )
        self.contact = ContactMessage.objects.create(
            name="Otieno", email="otieno@example.com", subject="Refund question", message="When do refunds land?"
        )
        ContactMessage.objects.create(
            name="Achieng", email="achieng@example.com", subject="Partnership",
            message="We run lodges in Laikipia.", status=ContactMessage.Status.ARCHIVED,
        )
        self.client.force_authenticate(self.admin)

    def test_list_filters_by_status(self) -> None:
        response = self.client.get(reverse("admin-contact-list"), {"status": "NEW"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pagination"]["total"], 1)
        self.assertEqual(response.data["messages"][0]["subject"], "Refund question")

    def test_patch_status_writes_audit(self) -> None:
        response = self.client.patch(
            reverse("admin-contact-detail", args=[self.contact.pk]), {"status": "REPLIED"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"]["status"], "REPLIED")
        audit = AuditLog.objects.get(action="contact_updated")
        self.assertEqual(audit.metadata["changes"]["status"], {"from": "NEW", "to": "REPLIED"})

    def test_invalid_status(self) -> None:
        response = self.client.patch(
            reverse("admin-contact-detail", args=[self.contact.pk]), {"status": "DONE"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
