"""FilterSet definitions for tour search and listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Tour


class TourFilterSet(django_filters.FilterSet):
    destination = django_filters.CharFilter(field_name="destination", lookup_expr="icontains")
    tour_type = django_filters.CharFilter(field_name="tour_type", lookup_expr="iexact")
    featured = django_filters.BooleanFilter(field_name="featured")
    price_min = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Tour
        fields = ["destination", "tour_type", "featured"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value)
            | Q(description__icontains=value)
            | Q(destination__icontains=value)
        )


class AdminTourFilterSet(django_filters.FilterSet):
    status = django_filters.CharFilter(method="filter_status")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Tour
        fields = ["status"]

    def filter_status(self, queryset, name, value):  # type: ignore
        if not value or value == "all":
            return queryset
        return queryset.filter(status=value)

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(agent__business_name__icontains=value))
