from django.contrib import admin  # type: ignore

from .models import CommissionTier, WithdrawalRequest


@admin.register(WithdrawalRequest)
class WithdrawalRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'agent', 'amount', 'currency', 'method', 'status', 'created_at')
    list_filter = ('status', 'method', 'currency')
    search_fields = ('agent__business_name', 'agent__user__email', 'transaction_ref')
    readonly_fields = ('processed_by', 'processed_at', 'created_at', 'updated_at')


@admin.register(CommissionTier)
class CommissionTierAdmin(admin.ModelAdmin):
    list_display = ('name', 'min_bookings', 'min_revenue', 'commission_rate', 'is_active')
    list_filter = ('is_active',)
