from django.urls import path

from .views import notification_list, notification_dismiss

app_name = "notifications"

urlpatterns = [
    path("", notification_list, name="list"),
    path("<int:notification_id>/dismiss/", notification_dismiss, name="dismiss"),
]
