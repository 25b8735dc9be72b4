import logging
from dataclasses import dataclass

from django.core.exceptions import ValidationError
from django.db import transaction

from accounts.models import User
from tasks.models import Task
from tasks.policy import requires_score_prompt

logger = logging.getLogger(__name__)

TASK_UPDATE_FIELDS = {
    "title",
    "description",
    "deadline",
    "priority",
    "status",
    "assignee_id",
    "score",
}


@dataclass(frozen=True)
class StatusChange:
    task: Task
    score_prompt: bool = False


def find_task_by_id(task_id):
    return (
        Task.objects
        .select_related("assignee", "creator")
        .filter(pk=task_id)
        .first()
    )


# ============================================================
# CREATE
# ============================================================

@transaction.atomic
def add_task(*, creator, title, description, assignee, deadline, priority=None):
    """
    Create a task owned by ``creator``.

    - Status always starts at To Do
    - Priority falls back to Medium
    """
    task = Task(
        title=(title or "").strip(),
        description=(description or "").strip(),
        assignee=assignee,
        creator=creator,
        deadline=deadline,
        status=Task.Status.TODO,
        priority=priority or Task.Priority.MEDIUM,
    )
    task.full_clean()
    task.save()

    logger.info(
        "Task %s created by user %s for user %s",
        task.pk, creator.pk, assignee.pk,
    )
    return task


# ============================================================
# UPDATE
# ============================================================

@transaction.atomic
def update_task(task_id, changes):
    """
    Apply a partial update.

    Raises ``Task.DoesNotExist`` for unknown ids. A score may only be
    written when the resulting status is Done.
    """
    changes = dict(changes)
    if "assignee" in changes:
        assignee = changes.pop("assignee")
        changes["assignee_id"] = getattr(assignee, "pk", assignee)

    unknown = set(changes) - TASK_UPDATE_FIELDS
    if unknown:
        raise ValidationError(f"Unsupported task fields: {', '.join(sorted(unknown))}")

    task = Task.objects.select_for_update().get(pk=task_id)

    if "assignee_id" in changes and not User.objects.filter(pk=changes["assignee_id"]).exists():
        raise ValidationError({"assignee": "Assignee does not exist."})

    for field, value in changes.items():
        setattr(task, field, value)

    if changes.get("score") is not None and task.status != Task.Status.DONE:
        raise ValidationError({"score": "A score can only be set on a task that is done."})

    task.full_clean()
    task.save()
    return task


def set_task_status(task_id, status, *, actor):
    """
    Move a task to ``status``.

    ``score_prompt`` tells the caller an admin just completed an
    unscored task and should be asked for a score.
    """
    with transaction.atomic():
        before = Task.objects.select_for_update().get(pk=task_id)
        prompt = requires_score_prompt(actor, before, status)
        task = update_task(task_id, {"status": status})

    return StatusChange(task=task, score_prompt=prompt)


def transfer_task(task_id, assignee_id, *, confirmed=False):
    """
    Hand a task to another user. Irreversible by policy, so the
    caller has to confirm explicitly.
    """
    if not confirmed:
        raise ValidationError("Transfer must be confirmed.")

    task = update_task(task_id, {"assignee_id": assignee_id})
    logger.info("Task %s transferred to user %s", task.pk, assignee_id)
    return task


def set_task_score(task_id, score):
    return update_task(task_id, {"score": score})
