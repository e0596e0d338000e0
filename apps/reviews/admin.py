from django.contrib import admin  # type: ignore

from .models import Review, ReviewHelpful


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'tour', 'user', 'rating', 'is_approved', 'helpful_count', 'created_at')
    list_filter = ('is_approved', 'is_verified', 'rating')
    search_fields = ('title', 'content', 'tour__title', 'user__email')
    readonly_fields = ('helpful_count', 'created_at', 'updated_at')


@admin.register(ReviewHelpful)
class ReviewHelpfulAdmin(admin.ModelAdmin):
    list_display = ('review', 'user', 'created_at')
