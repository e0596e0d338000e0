"""Serializers for balances, withdrawals and commission tiers."""

from __future__ import annotations

import re
from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import CommissionTier, WithdrawalRequest

MPESA_PHONE_RE = re.compile(r"^(\+?254|0)[17]\d{8}$")


class BankDetailsSerializer(serializers.Serializer):
    bank_name = serializers.CharField(max_length=255)
    account_number = serializers.CharField(max_length=64)
    account_name = serializers.CharField(max_length=255)
    branch_code = serializers.CharField(max_length=32, required=False, allow_blank=True)
    swift_code = serializers.CharField(max_length=32, required=False, allow_blank=True)


class WithdrawalCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    currency = serializers.ChoiceField(
        choices=WithdrawalRequest.Currency.choices,
        default=WithdrawalRequest.Currency.USD,
    )
    method = serializers.ChoiceField(choices=WithdrawalRequest.Method.choices)
    mpesa_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    bank_details = BankDetailsSerializer(required=False)

    def validate_mpesa_phone(self, value: str) -> str:
        return value.replace(" ", "")

    def validate(self, attrs):  # type: ignore
        method = attrs["method"]
        if method == WithdrawalRequest.Method.MPESA:
            phone = attrs.get("mpesa_phone", "")
            if not phone:
                raise serializers.ValidationError({"mpesa_phone": "M-Pesa phone number is required"})
            if not MPESA_PHONE_RE.match(phone):
                raise serializers.ValidationError(
                    {"mpesa_phone": "Invalid M-Pesa phone number. Use 07XXXXXXXX or +2547XXXXXXXX"}
                )
            attrs.pop("bank_details", None)
        elif method == WithdrawalRequest.Method.BANK:
            if not attrs.get("bank_details"):
                raise serializers.ValidationError(
                    {"bank_details": "Bank name, account number and account name are required"}
                )
            attrs["mpesa_phone"] = ""
        return attrs


class WithdrawalSerializer(serializers.ModelSerializer):
    agent = serializers.SerializerMethodField()

    class Meta:
        model = WithdrawalRequest
        fields = [
            "id",
            "agent",
            "amount",
            "currency",
            "method",
            "mpesa_phone",
            "bank_details",
            "status",
            "processed_at",
            "transaction_ref",
            "rejection_reason",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_agent(self, obj: WithdrawalRequest) -> dict:
        return {
            "id": obj.agent_id,
            "business_name": obj.agent.business_name,
            "email": obj.agent.user.email,
        }


class ApproveWithdrawalSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ProcessWithdrawalSerializer(serializers.Serializer):
    transaction_ref = serializers.CharField(max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class RejectWithdrawalSerializer(serializers.Serializer):
    reason = serializers.CharField(min_length=10, max_length=500)


class CommissionTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommissionTier
        fields = [
            "id",
            "name",
            "min_bookings",
            "min_revenue",
            "commission_rate",
            "description",
            "color",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class CommissionRateSerializer(serializers.Serializer):
    commission_rate = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("50"),
    )
    reason = serializers.CharField(required=False, allow_blank=True, default="")
