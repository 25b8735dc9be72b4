from django.http import JsonResponse
from django.shortcuts import get_object_or_404

from accounts.forms import UserUpdateForm
from accounts.models import User
from accounts.serializers import user_to_dict
from accounts.services.user_service import delete_user, update_user
from accounts.views.utils import enforce, form_errors, json_view, request_data
from notifications.services.emitter import notify
from tasks.policy import UserAction, check_user_action, check_user_update


@json_view("GET")
def users(request):
    qs = User.objects.order_by("name", "id")
    return JsonResponse(
        {
            "users": [user_to_dict(u) for u in qs],
            "total_users": qs.count(),
        }
    )


@json_view("GET", "POST")
def user_detail(request, user_id):
    target = get_object_or_404(User, pk=user_id)

    if request.method == "GET":
        return JsonResponse({"user": user_to_dict(target)})

    form = UserUpdateForm(request_data(request))
    if not form.is_valid():
        return JsonResponse(
            {
                "success": False,
                "error": "Please correct the errors below.",
                "errors": form_errors(form),
            },
            status=400,
        )

    enforce(check_user_update(request.user, target, form.changes))

    user = update_user(target.pk, form.changes)
    return JsonResponse({"success": True, "user": user_to_dict(user)})


@json_view("POST")
def user_delete(request, user_id):
    target = get_object_or_404(User, pk=user_id)

    enforce(check_user_action(request.user, target, UserAction.DELETE))

    name = delete_user(target.pk)
    notify(f"User {name} has been deleted.", recipient=request.user)

    return JsonResponse({"success": True, "message": f"User {name} has been deleted."})
