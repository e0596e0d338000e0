from django.contrib import admin  # type: ignore

from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "user", "action", "resource", "resource_id", "ip_address")
    list_filter = ("action", "resource", "created_at")
    search_fields = ("user__email", "ip_address", "resource_id")
    date_hierarchy = "created_at"
    readonly_fields = (
        "user",
        "action",
        "resource",
        "resource_id",
        "metadata",
        "ip_address",
        "user_agent",
        "created_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
