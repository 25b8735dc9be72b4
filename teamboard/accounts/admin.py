from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


# ============================================================
# USER ADMIN
# ============================================================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("name",)

    list_display = (
        "name",
        "email",
        "role",
        "is_active",
        "is_staff",
    )

    list_filter = (
        "role",
        "is_active",
        "is_staff",
    )

    search_fields = (
        "username",
        "email",
        "name",
    )

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Board", {
            "fields": (
                "name",
                "role",
                "avatar_url",
            )
        }),
    )
