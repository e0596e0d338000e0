"""Financial domain models for SafariPlus."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CommissionTier(models.Model):
    """
    Named commission level used to classify agents by volume.

    Tiers do not change an agent's ``commission_rate`` by themselves; they
    only describe which level an agent currently qualifies for.
    """

    name = models.CharField(max_length=100, unique=True)
    min_bookings = models.PositiveIntegerField(default=0)
    min_revenue = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    description = models.TextField(blank=True)
    color = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Commission tier")
        verbose_name_plural = _("Commission tiers")
        ordering = ["min_bookings"]

    def __str__(self) -> str:
        return f"{self.name} ({self.commission_rate}%)"


class WithdrawalRequest(models.Model):
    """Agent payout request reviewed by an administrator."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        APPROVED = "APPROVED", _("Approved")
        PROCESSING = "PROCESSING", _("Processing")
        COMPLETED = "COMPLETED", _("Completed")
        REJECTED = "REJECTED", _("Rejected")

    class Currency(models.TextChoices):
        USD = "USD", "USD"
        KES = "KES", "KES"

    class Method(models.TextChoices):
        MPESA = "mpesa", _("M-Pesa")
        BANK = "bank", _("Bank transfer")

    agent = models.ForeignKey(
        "users.Agent",
        on_delete=models.PROTECT,
        related_name="withdrawals",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    method = models.CharField(max_length=10, choices=Method.choices)
    mpesa_phone = models.CharField(max_length=20, blank=True)
    # bank_name, account_number, account_name, optional branch_code and swift_code
    bank_details = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    processed_by = models.ForeignKey(
        "users.CustomUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="processed_withdrawals",
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    transaction_ref = models.CharField(max_length=100, blank=True)
    rejection_reason = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Withdrawal request")
        verbose_name_plural = _("Withdrawal requests")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["agent", "status"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"Withdrawal {self.pk} {self.amount} {self.currency} ({self.status})"
