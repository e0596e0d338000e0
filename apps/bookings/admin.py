"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_reference",
        "tour",
        "user",
        "agent",
        "status",
        "payment_status",
        "start_date",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "featured", "start_date")
    search_fields = ("booking_reference", "tour__title", "contact_email", "contact_name")
    readonly_fields = (
        "booking_reference",
        "base_amount",
        "total_amount",
        "platform_commission",
        "agent_earnings",
        "created_at",
        "updated_at",
    )
