import json
import logging
from functools import wraps

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.http import Http404, JsonResponse

from accounts.exceptions import PolicyDenied, StructuralInvariantViolation
from notifications.models import Notification
from notifications.services.emitter import notify

logger = logging.getLogger(__name__)


def request_data(request):
    """
    Form-encoded POST data, or the decoded body for JSON requests.
    """
    if request.content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    return request.POST


def enforce(decision):
    if not decision:
        raise PolicyDenied(decision.reason)


def form_errors(form):
    """
    Field errors keyed by field name, non-field errors under "general".
    """
    formatted = {}
    for field, errors in form.errors.items():
        key = "general" if field == "__all__" else field
        formatted[key] = [str(e) for e in errors]
    return formatted


def validation_errors(exc):
    if hasattr(exc, "message_dict"):
        return {
            ("general" if field == "__all__" else field): messages
            for field, messages in exc.message_dict.items()
        }
    return {"general": exc.messages}


def json_view(*methods):
    """
    Restrict methods and translate service errors into JSON responses:

    - PolicyDenied -> 403
    - ValidationError -> 400
    - DoesNotExist -> 404
    - StructuralInvariantViolation -> 409 (+ in-app reminder)
    """

    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if methods and request.method not in methods:
                return JsonResponse(
                    {"success": False, "error": f"Invalid request method. Please use {', '.join(methods)}."},
                    status=405,
                )

            try:
                return view(request, *args, **kwargs)

            except PolicyDenied as exc:
                logger.info(
                    "Policy denied %s %s for user %s: %s",
                    request.method, request.path, request.user.pk, exc.reason,
                )
                return JsonResponse({"success": False, "error": exc.reason}, status=403)

            except ValidationError as exc:
                return JsonResponse(
                    {
                        "success": False,
                        "error": "Please correct the errors below.",
                        "errors": validation_errors(exc),
                    },
                    status=400,
                )

            except (ObjectDoesNotExist, Http404):
                return JsonResponse({"success": False, "error": "Not found."}, status=404)

            except StructuralInvariantViolation as exc:
                notify(exc.reason, kind=Notification.Kind.REMINDER, recipient=request.user)
                return JsonResponse({"success": False, "error": exc.reason}, status=409)

        return wrapper

    return decorator
