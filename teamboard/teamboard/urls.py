from django.contrib import admin
from django.urls import path, include
from django.shortcuts import redirect


def root_redirect(request):
    if request.user.is_authenticated:
        return redirect("tasks:board")
    return redirect("login")


urlpatterns = [
    # ROOT
    path("", root_redirect, name="root"),

    # DJANGO ADMIN (STAFF ONLY)
    path("django-admin/", admin.site.urls),

    # AUTH
    path("auth/", include("accounts.urls")),

    # JSON API
    path("api/users/", include("accounts.api_urls")),
    path("api/tasks/", include("tasks.urls")),
    path("api/notifications/", include("notifications.urls")),
]
