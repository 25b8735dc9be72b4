from django.http import JsonResponse

from accounts.views.utils import json_view
from notifications.services.emitter import dismiss_notification, visible_notifications


def _notification_to_dict(notification):
    return {
        "id": notification.pk,
        "message": notification.message,
        "type": notification.kind,
        "task_id": notification.task_id,
        "expires_at": notification.expires_at.isoformat(),
    }


@json_view("GET")
def notification_list(request):
    qs = visible_notifications(request.user)
    return JsonResponse(
        {"notifications": [_notification_to_dict(n) for n in qs]}
    )


@json_view("POST")
def notification_dismiss(request, notification_id):
    if not dismiss_notification(notification_id, user=request.user):
        return JsonResponse({"success": False, "error": "Not found."}, status=404)
    return JsonResponse({"success": True})
