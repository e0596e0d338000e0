from __future__ import annotations

import django_filters  # type: ignore

from .models import WithdrawalRequest


class WithdrawalFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=WithdrawalRequest.Status.choices)

    class Meta:
        model = WithdrawalRequest
        fields = ["status"]


class AdminWithdrawalFilterSet(WithdrawalFilterSet):
    agent = django_filters.NumberFilter(field_name="agent_id")
    method = django_filters.ChoiceFilter(choices=WithdrawalRequest.Method.choices)

    class Meta:
        model = WithdrawalRequest
        fields = ["status", "agent", "method"]
