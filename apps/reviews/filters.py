"""FilterSet definitions for review lists."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Review

SORT_ORDERINGS = {
    "recent": ["-created_at"],
    "helpful": ["-helpful_count", "-created_at"],
    "rating_high": ["-rating", "-created_at"],
    "rating_low": ["rating", "-created_at"],
}


class ReviewFilterSet(django_filters.FilterSet):
    tour = django_filters.NumberFilter(field_name="tour_id")
    rating = django_filters.NumberFilter(field_name="rating")
    sort = django_filters.CharFilter(method="filter_sort")

    class Meta:
        model = Review
        fields = ["tour", "rating"]

    def filter_sort(self, queryset, name, value):  # type: ignore
        return queryset.order_by(*SORT_ORDERINGS.get(value, SORT_ORDERINGS["recent"]))


class AdminReviewFilterSet(django_filters.FilterSet):
    is_approved = django_filters.BooleanFilter(field_name="is_approved")
    tour = django_filters.NumberFilter(field_name="tour_id")

    class Meta:
        model = Review
        fields = ["is_approved", "tour"]
