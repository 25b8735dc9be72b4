from django.contrib import admin

from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "assignee",
        "creator",
        "deadline",
        "status",
        "priority",
        "score",
    )

    list_filter = (
        "status",
        "priority",
        "deadline",
    )

    search_fields = (
        "title",
        "description",
        "assignee__email",
        "creator__email",
    )

    raw_id_fields = ("assignee", "creator")
    date_hierarchy = "deadline"

    def has_delete_permission(self, request, obj=None):
        # Tasks are never deleted
        return False
