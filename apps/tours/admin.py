from django.contrib import admin  # type: ignore

from .models import Tour


@admin.register(Tour)
class TourAdmin(admin.ModelAdmin):
    list_display = ("title", "agent", "destination", "base_price", "status", "featured", "view_count")
    list_filter = ("status", "featured", "tour_type")
    search_fields = ("title", "destination", "agent__business_name")
    prepopulated_fields = {"slug": ("title",)}
    readonly_fields = ("view_count", "created_at", "updated_at")
