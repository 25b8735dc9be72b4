from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Notification, StoredValue


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = (
        "colored_message",
        "recipient",
        "kind",
        "task",
        "created_at",
        "expires_at",
        "is_dismissed",
    )

    list_filter = (
        "kind",
        "is_dismissed",
    )

    search_fields = (
        "message",
        "recipient__email",
        "recipient__name",
    )

    raw_id_fields = ("recipient", "task")
    ordering = ("-created_at",)
    actions = ["dismiss_selected"]

    # =====================================================
    # CUSTOM DISPLAY HELPERS
    # =====================================================
    def colored_message(self, obj):
        color_map = {
            Notification.Kind.REMINDER: "#f59e0b",  # orange
            Notification.Kind.SUCCESS: "#16a34a",   # green
        }

        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            color_map.get(obj.kind, "#000000"),
            obj.message,
        )

    colored_message.short_description = "Message"

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Dismiss selected notifications")
    def dismiss_selected(self, request, queryset):
        queryset.update(is_dismissed=True, dismissed_at=timezone.now())


@admin.register(StoredValue)
class StoredValueAdmin(admin.ModelAdmin):
    list_display = ("key", "updated_at")
    readonly_fields = ("updated_at",)
