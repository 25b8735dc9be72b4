from django.urls import path

from .views import (
    board, task_create, task_detail, task_status, task_transfer, task_score
)

app_name = "tasks"

urlpatterns = [
    path("", board, name="board"),
    path("create/", task_create, name="task-create"),
    path("<int:task_id>/", task_detail, name="task-detail"),
    path("<int:task_id>/status/", task_status, name="task-status"),
    path("<int:task_id>/transfer/", task_transfer, name="task-transfer"),
    path("<int:task_id>/score/", task_score, name="task-score"),
]
