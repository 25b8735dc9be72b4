import logging

from django.contrib.auth import authenticate, login, logout
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from accounts.exceptions import IdentityVerificationFailure
from accounts.forms import LoginForm, SignupForm
from accounts.identity import verify_identity_token
from accounts.serializers import user_to_dict
from accounts.services.user_service import create_user, find_or_create_identity_user
from accounts.views.utils import form_errors, json_view, request_data
from notifications.services.emitter import notify

logger = logging.getLogger(__name__)

MODEL_BACKEND = "django.contrib.auth.backends.ModelBackend"


@json_view("POST")
def login_view(request):
    form = LoginForm(request_data(request))

    if not form.is_valid():
        return JsonResponse(
            {"success": False, "error": "Please enter both email and password."},
            status=400,
        )

    user = authenticate(
        request,
        username=form.cleaned_data["email"].strip().lower(),
        password=form.cleaned_data["password"],
    )

    if user is None:
        return JsonResponse(
            {"success": False, "error": "Invalid email or password."},
            status=401,
        )

    login(request, user)
    return JsonResponse({"success": True, "user": user_to_dict(user)})


@json_view("POST")
def signup_view(request):
    form = SignupForm(request_data(request))

    if not form.is_valid():
        return JsonResponse(
            {
                "success": False,
                "error": "Please correct the errors below.",
                "errors": form_errors(form),
            },
            status=400,
        )

    user = create_user(
        name=form.cleaned_data["name"],
        email=form.cleaned_data["email"],
        password=form.cleaned_data["password"],
        role=form.cleaned_data["role"],
    )

    login(request, user, backend=MODEL_BACKEND)
    notify("Account created successfully! Welcome.", recipient=user)

    return JsonResponse({"success": True, "user": user_to_dict(user)}, status=201)


@csrf_exempt
@json_view("POST")
def google_login_view(request):
    """
    Exchange an identity-provider ID token for a board session.

    - 400: no token
    - 401: token rejected
    - 200: verified profile, session created
    """
    token = request_data(request).get("token")

    if not token:
        return JsonResponse({"message": "ID token not provided."}, status=400)

    try:
        profile = verify_identity_token(token)
    except IdentityVerificationFailure as exc:
        logger.info("Identity verification failed: %s", exc)
        return JsonResponse(
            {"message": "Invalid ID token. Authentication failed."},
            status=401,
        )

    user, created = find_or_create_identity_user(profile)
    login(request, user, backend=MODEL_BACKEND)

    if created:
        notify("Account created successfully! Welcome.", recipient=user)
    else:
        notify(f"Welcome back, {user.name}!", recipient=user)

    return JsonResponse(
        {
            "message": "Authentication successful!",
            "user": {
                "name": profile.name,
                "email": profile.email,
                "picture": profile.picture_url,
                "googleId": profile.subject,
            },
        }
    )


@json_view("POST")
def logout_view(request):
    logout(request)
    return JsonResponse({"success": True})
