"""
Role-based authorization rules for tasks and users.

Every function here is pure: it looks at the actor and a snapshot of the
task or user and returns a ``Decision``. Expected denials are values, not
exceptions; the view layer decides how to surface them.

Roles:
- Viewer: read-only everywhere
- Member: creates tasks for themselves, edits tasks they created,
  moves and transfers tasks assigned to them
- Admin: everything on tasks except deletion, full user management
"""

import enum
from dataclasses import dataclass

from accounts.models import User
from tasks.models import Task


class TaskAction(str, enum.Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT_DETAILS = "edit_details"
    CHANGE_STATUS = "change_status"
    TRANSFER = "transfer"
    SCORE = "score"
    DELETE = "delete"


class UserAction(str, enum.Enum):
    EDIT_PROFILE = "edit_profile"
    EDIT_ROLE = "edit_role"
    DELETE = "delete"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    def __bool__(self):
        return self.allowed


ALLOW = Decision(True)

VIEWER_READ_ONLY = "Viewers have read-only access."
TASKS_NOT_DELETABLE = "Tasks cannot be deleted."


def deny(reason):
    return Decision(False, reason)


# Task fields mapped to the action that may change them
TASK_FIELD_ACTIONS = {
    "title": TaskAction.EDIT_DETAILS,
    "description": TaskAction.EDIT_DETAILS,
    "deadline": TaskAction.EDIT_DETAILS,
    "priority": TaskAction.EDIT_DETAILS,
    "status": TaskAction.CHANGE_STATUS,
    "assignee": TaskAction.TRANSFER,
    "assignee_id": TaskAction.TRANSFER,
    "score": TaskAction.SCORE,
}

USER_FIELD_ACTIONS = {
    "name": UserAction.EDIT_PROFILE,
    "avatar_url": UserAction.EDIT_PROFILE,
    "email": UserAction.EDIT_ROLE,
    "role": UserAction.EDIT_ROLE,
}


# ============================================================
# TASKS
# ============================================================

def can_create_task(actor, assignee_id=None):
    if actor.role == User.Role.VIEWER:
        return deny(VIEWER_READ_ONLY)

    if actor.role == User.Role.ADMIN:
        return ALLOW

    if assignee_id is not None and assignee_id != actor.pk:
        return deny("Only admins can assign new tasks to other users.")

    return ALLOW


def check_task_action(actor, task, action):
    action = TaskAction(action)

    if action is TaskAction.CREATE:
        return can_create_task(actor, task.assignee_id if task else None)

    if action is TaskAction.DELETE:
        return deny(TASKS_NOT_DELETABLE)

    role = actor.role
    is_creator = task.creator_id == actor.pk
    is_assignee = task.assignee_id == actor.pk

    if action is TaskAction.VIEW:
        if role in (User.Role.ADMIN, User.Role.VIEWER) or is_creator or is_assignee:
            return ALLOW
        return deny("You can only view tasks you created or are assigned to.")

    if role == User.Role.VIEWER:
        return deny(VIEWER_READ_ONLY)

    if role == User.Role.ADMIN:
        return ALLOW

    # Member
    if action is TaskAction.EDIT_DETAILS:
        if is_creator:
            return ALLOW
        return deny("Only the task creator or an admin can edit task details.")

    if action in (TaskAction.CHANGE_STATUS, TaskAction.TRANSFER):
        if is_assignee:
            return ALLOW
        return deny("Only the assignee or an admin can move or transfer this task.")

    if action is TaskAction.SCORE:
        return deny("Only admins can score tasks.")

    return deny("Action not permitted.")


def permitted_task_actions(actor, task):
    return frozenset(
        action
        for action in TaskAction
        if action is not TaskAction.CREATE and check_task_action(actor, task, action)
    )


def check_task_update(actor, task, changes):
    """
    Check a partial update field by field.
    Returns the first denial, or ALLOW when every change is permitted.
    """
    if not changes:
        return ALLOW

    for field in changes:
        action = TASK_FIELD_ACTIONS.get(field)
        if action is None:
            return deny(f"Field '{field}' cannot be changed.")

        decision = check_task_action(actor, task, action)
        if not decision:
            return decision

    return ALLOW


def requires_score_prompt(actor, task, new_status):
    """
    Admin moving an unscored task to Done must be asked for a score.
    """
    return (
        actor.role == User.Role.ADMIN
        and new_status == Task.Status.DONE
        and task.score is None
    )


# ============================================================
# USERS
# ============================================================

def check_user_action(actor, target, action):
    action = UserAction(action)

    if actor.role == User.Role.VIEWER:
        return deny(VIEWER_READ_ONLY)

    if action is UserAction.DELETE:
        if actor.role != User.Role.ADMIN:
            return deny("Only admins can delete users.")
        if target.pk == actor.pk:
            return deny("You cannot delete yourself.")
        return ALLOW

    if actor.role == User.Role.ADMIN:
        return ALLOW

    if action is UserAction.EDIT_PROFILE and target.pk == actor.pk:
        return ALLOW

    return deny("Only admins can manage users.")


def check_user_update(actor, target, changes):
    if not changes:
        return ALLOW

    for field in changes:
        action = USER_FIELD_ACTIONS.get(field)
        if action is None:
            return deny(f"Field '{field}' cannot be changed.")

        decision = check_user_action(actor, target, action)
        if not decision:
            return decision

    return ALLOW
