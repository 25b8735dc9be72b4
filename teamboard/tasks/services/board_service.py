from datetime import timedelta

from django.db.models import Q
from django.utils import timezone

from accounts.models import User
from tasks.models import Task

DEADLINE_FILTERS = ("today", "this-week", "overdue")


def visible_tasks(user):
    """
    Admins and viewers see every task; members only see tasks
    they created or are assigned to.
    """
    qs = Task.objects.select_related("assignee", "creator")

    if user.role in (User.Role.ADMIN, User.Role.VIEWER):
        return qs

    return qs.filter(Q(assignee=user) | Q(creator=user))


def filter_tasks(
    qs,
    *,
    search=None,
    status=None,
    assignee_id=None,
    creator_id=None,
    deadline=None,
    today=None,
):
    today = today or timezone.localdate()

    if search:
        qs = qs.filter(
            Q(title__icontains=search) | Q(description__icontains=search)
        )

    if status:
        qs = qs.filter(status=status)

    if assignee_id:
        qs = qs.filter(assignee_id=assignee_id)

    if creator_id:
        qs = qs.filter(creator_id=creator_id)

    if deadline == "today":
        qs = qs.filter(deadline=today)
    elif deadline == "this-week":
        qs = qs.filter(deadline__gte=today, deadline__lte=today + timedelta(days=7))
    elif deadline == "overdue":
        qs = qs.filter(deadline__lt=today).exclude(status=Task.Status.DONE)

    return qs


def board_columns(tasks, today=None):
    """
    Split tasks into Kanban columns. Overdue tasks leave their
    To Do / In Progress column and are shown on their own.
    """
    today = today or timezone.localdate()
    columns = {"todo": [], "in_progress": [], "overdue": [], "done": []}

    for task in tasks:
        if task.is_done:
            columns["done"].append(task)
        elif task.is_overdue(today):
            columns["overdue"].append(task)
        elif task.status == Task.Status.IN_PROGRESS:
            columns["in_progress"].append(task)
        else:
            columns["todo"].append(task)

    return columns
