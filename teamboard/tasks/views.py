from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone

from accounts.views.utils import enforce, form_errors, json_view, request_data
from tasks.forms import ScoreForm, TaskForm, TaskUpdateForm, TransferForm
from tasks.models import Task
from tasks.policy import (
    TaskAction,
    can_create_task,
    check_task_action,
    check_task_update,
    requires_score_prompt,
)
from tasks.serializers import task_to_dict
from tasks.services import task_service
from tasks.services.board_service import board_columns, filter_tasks, visible_tasks


def _invalid(form):
    return JsonResponse(
        {
            "success": False,
            "error": "Please correct the errors below.",
            "errors": form_errors(form),
        },
        status=400,
    )


def _get_visible_task(request, task_id):
    task = get_object_or_404(Task.objects.select_related("assignee", "creator"), pk=task_id)
    enforce(check_task_action(request.user, task, TaskAction.VIEW))
    return task


# ============================================================
# BOARD
# ============================================================

@json_view("GET")
def board(request):
    today = timezone.localdate()

    qs = filter_tasks(
        visible_tasks(request.user),
        search=request.GET.get("q"),
        status=request.GET.get("status"),
        assignee_id=request.GET.get("assignee"),
        creator_id=request.GET.get("creator"),
        deadline=request.GET.get("deadline"),
        today=today,
    )

    columns = board_columns(qs, today=today)

    return JsonResponse(
        {
            "columns": {
                name: [task_to_dict(t, request.user) for t in tasks]
                for name, tasks in columns.items()
            },
            "can_create": bool(can_create_task(request.user)),
        }
    )


# ============================================================
# CREATE
# ============================================================

@json_view("POST")
def task_create(request):
    form = TaskForm(request_data(request))
    if not form.is_valid():
        return _invalid(form)

    assignee = form.cleaned_data.get("assignee") or request.user
    enforce(can_create_task(request.user, assignee.pk))

    task = task_service.add_task(
        creator=request.user,
        title=form.cleaned_data["title"],
        description=form.cleaned_data["description"],
        assignee=assignee,
        deadline=form.cleaned_data["deadline"],
        priority=form.cleaned_data.get("priority"),
    )

    return JsonResponse(
        {"success": True, "task": task_to_dict(task, request.user)},
        status=201,
    )


# ============================================================
# DETAIL / UPDATE
# ============================================================

@json_view("GET", "POST")
def task_detail(request, task_id):
    task = _get_visible_task(request, task_id)

    if request.method == "GET":
        return JsonResponse({"task": task_to_dict(task, request.user)})

    form = TaskUpdateForm(request_data(request))
    if not form.is_valid():
        return _invalid(form)

    changes = form.changes
    enforce(check_task_update(request.user, task, changes))

    score_prompt = (
        "status" in changes
        and requires_score_prompt(request.user, task, changes["status"])
        and changes.get("score") is None
    )
    task = task_service.update_task(task.pk, changes)

    return JsonResponse(
        {
            "success": True,
            "task": task_to_dict(task, request.user),
            "score_prompt": score_prompt,
        }
    )


@json_view("POST")
def task_status(request, task_id):
    task = _get_visible_task(request, task_id)

    status = request_data(request).get("status")
    if status not in Task.Status.values:
        return JsonResponse(
            {"success": False, "errors": {"status": ["Invalid status."]}},
            status=400,
        )

    enforce(check_task_action(request.user, task, TaskAction.CHANGE_STATUS))

    change = task_service.set_task_status(task.pk, status, actor=request.user)

    return JsonResponse(
        {
            "success": True,
            "task": task_to_dict(change.task, request.user),
            "score_prompt": change.score_prompt,
        }
    )


@json_view("POST")
def task_transfer(request, task_id):
    task = _get_visible_task(request, task_id)

    form = TransferForm(request_data(request))
    if not form.is_valid():
        return _invalid(form)

    enforce(check_task_action(request.user, task, TaskAction.TRANSFER))

    task = task_service.transfer_task(
        task.pk,
        form.cleaned_data["assignee"].pk,
        confirmed=form.cleaned_data["confirm"],
    )

    return JsonResponse({"success": True, "task": task_to_dict(task, request.user)})


@json_view("POST")
def task_score(request, task_id):
    task = _get_visible_task(request, task_id)

    form = ScoreForm(request_data(request))
    if not form.is_valid():
        return _invalid(form)

    enforce(check_task_action(request.user, task, TaskAction.SCORE))

    task = task_service.set_task_score(task.pk, form.cleaned_data["score"])
    return JsonResponse({"success": True, "task": task_to_dict(task, request.user)})
