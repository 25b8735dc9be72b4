from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import redirect

from notifications.scheduler import get_scanner


class LoginRequiredMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

        self.PUBLIC_PREFIXES = (
            settings.LOGIN_URL,
            "/auth/",
            "/static/",
            "/django-admin/",  # Django admin has its own login
        )

    def __call__(self, request):
        path = request.path

        # Allow public paths
        if path.startswith(self.PUBLIC_PREFIXES):
            return self.get_response(request)

        # Block unauthenticated users
        if not request.user.is_authenticated:
            if path.startswith("/api/"):
                return JsonResponse(
                    {"success": False, "error": "Authentication required."},
                    status=401,
                )
            return redirect(settings.LOGIN_URL)

        # Sessions outlive restarts, so resume the scanner in this process
        get_scanner().ensure_started()

        return self.get_response(request)
