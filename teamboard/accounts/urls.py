from django.urls import path

from .views.auth_views import (
    login_view, signup_view, google_login_view, logout_view
)

urlpatterns = [
    path("login/", login_view, name="login"),
    path("signup/", signup_view, name="signup"),
    path("google/", google_login_view, name="google-login"),
    path("logout/", logout_view, name="logout"),
]
