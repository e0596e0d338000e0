"""FilterSet definitions for booking lists."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Booking


def _ignore_all(queryset, field: str, value):
    if not value or value == "all":
        return queryset
    return queryset.filter(**{field: value})


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.CharFilter(method="filter_status")

    class Meta:
        model = Booking
        fields = ["status"]

    def filter_status(self, queryset, name, value):  # type: ignore
        return _ignore_all(queryset, "status", value)


class AdminBookingFilterSet(BookingFilterSet):
    payment_status = django_filters.CharFilter(method="filter_payment_status")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Booking
        fields = ["status", "payment_status"]

    def filter_payment_status(self, queryset, name, value):  # type: ignore
        return _ignore_all(queryset, "payment_status", value)

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(booking_reference__icontains=value)
            | Q(contact_name__icontains=value)
            | Q(contact_email__icontains=value)
            | Q(tour__title__icontains=value)
        )
