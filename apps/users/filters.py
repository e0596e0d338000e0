"""FilterSet definitions for the agent administration list."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Agent


class AgentFilterSet(django_filters.FilterSet):
    status = django_filters.CharFilter(method="filter_status")
    verified = django_filters.BooleanFilter(field_name="is_verified")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Agent
        fields = ["status", "verified"]

    def filter_status(self, queryset, name, value):  # type: ignore
        if not value or value == "all":
            return queryset
        return queryset.filter(status=value)

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(business_name__icontains=value)
            | Q(user__email__icontains=value)
            | Q(user__name__icontains=value)
        )
