"""
Bot protection for public forms.

Forms carry two hidden fields: a honeypot (``hp``) that humans never fill,
and the milliseconds the visitor spent on the form (``lt``). A submission is
rejected when the honeypot is filled or when it arrived faster than a human
could type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

DEFAULT_MIN_FORM_TIME_MS = 3000

REASON_HONEYPOT = "honeypot"
REASON_TOO_FAST = "too_fast"


@dataclass(frozen=True)
class BotCheck:
    is_valid: bool
    reason: Optional[str] = None


def validate_bot_protection(
    honeypot: Optional[str],
    elapsed_ms: Optional[int],
    min_form_time_ms: int = DEFAULT_MIN_FORM_TIME_MS,
) -> BotCheck:
    """
    Classify a single submission.

    A missing ``elapsed_ms`` is not held against the caller; only the
    honeypot decides in that case.
    """
    if honeypot:
        return BotCheck(is_valid=False, reason=REASON_HONEYPOT)
    if elapsed_ms is not None and elapsed_ms < min_form_time_ms:
        return BotCheck(is_valid=False, reason=REASON_TOO_FAST)
    return BotCheck(is_valid=True)


class BotProtectedSerializerMixin(serializers.Serializer):
    """Adds the ``hp``/``lt`` fields and rejects submissions that look automated."""

    hp = serializers.CharField(required=False, allow_blank=True, write_only=True)
    lt = serializers.IntegerField(required=False, allow_null=True, write_only=True, min_value=0)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        attrs = super().validate(attrs)
        check = validate_bot_protection(
            attrs.pop("hp", ""),
            attrs.pop("lt", None),
            getattr(settings, "BOT_PROTECTION_MIN_FORM_TIME_MS", DEFAULT_MIN_FORM_TIME_MS),
        )
        if not check.is_valid:
            raise serializers.ValidationError(
                {"non_field_errors": ["Submission rejected. Please try again."]},
                code=check.reason,
            )
        return attrs
