from django.urls import path

from .views.user_views import users, user_detail, user_delete

app_name = "accounts"

urlpatterns = [
    path("", users, name="users"),
    path("<int:user_id>/", user_detail, name="user-detail"),
    path("<int:user_id>/delete/", user_delete, name="user-delete"),
]
