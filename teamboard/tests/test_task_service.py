from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError

from tasks.models import Task
from tasks.services.task_service import (
    add_task,
    set_task_score,
    set_task_status,
    transfer_task,
    update_task,
)

pytestmark = pytest.mark.django_db


def test_add_task_fills_defaults(member, today):
    task = add_task(
        creator=member,
        title="  Fix login button  ",
        description="Safari mobile rendering bug.",
        assignee=member,
        deadline=today,
    )

    assert task.pk is not None
    assert task.title == "Fix login button"
    assert task.status == Task.Status.TODO
    assert task.priority == Task.Priority.MEDIUM
    assert task.creator == member
    assert task.score is None


def test_add_task_requires_title_and_description(member, today):
    with pytest.raises(ValidationError) as exc:
        add_task(creator=member, title="", description="", assignee=member, deadline=today)

    assert "title" in exc.value.message_dict
    assert "description" in exc.value.message_dict


def test_update_task_partial(member, make_task, today):
    task = make_task(assignee=member)

    updated = update_task(task.pk, {"title": "New title", "deadline": today + timedelta(days=9)})

    assert updated.title == "New title"
    assert updated.deadline == today + timedelta(days=9)
    assert updated.description == task.description


def test_update_unknown_task_raises_does_not_exist(db):
    with pytest.raises(Task.DoesNotExist):
        update_task(12345, {"title": "Nope"})


def test_score_requires_done_status(member, make_task):
    task = make_task(assignee=member)

    with pytest.raises(ValidationError):
        set_task_score(task.pk, 90)

    update_task(task.pk, {"status": Task.Status.DONE})
    assert set_task_score(task.pk, 90).score == 90


def test_score_out_of_range_is_rejected(member, make_task):
    task = make_task(assignee=member, status=Task.Status.DONE)

    with pytest.raises(ValidationError):
        set_task_score(task.pk, 101)


def test_score_persists_when_task_reopened(member, make_task):
    task = make_task(assignee=member, status=Task.Status.DONE, score=70)

    reopened = update_task(task.pk, {"status": Task.Status.IN_PROGRESS})

    assert reopened.score == 70


def test_admin_completing_unscored_task_gets_score_prompt(admin, member, make_task):
    task = make_task(assignee=member)

    change = set_task_status(task.pk, Task.Status.DONE, actor=admin)

    assert change.task.status == Task.Status.DONE
    assert change.score_prompt is True


def test_assignee_completing_task_gets_no_score_prompt(member, make_task):
    task = make_task(assignee=member)

    change = set_task_status(task.pk, Task.Status.DONE, actor=member)

    assert change.score_prompt is False


def test_transfer_requires_confirmation(member, other_member, make_task):
    task = make_task(assignee=member)

    with pytest.raises(ValidationError):
        transfer_task(task.pk, other_member.pk)

    task.refresh_from_db()
    assert task.assignee == member

    assert transfer_task(task.pk, other_member.pk, confirmed=True).assignee == other_member


def test_transfer_to_missing_user_is_rejected(member, make_task):
    task = make_task(assignee=member)

    with pytest.raises(ValidationError):
        transfer_task(task.pk, 999, confirmed=True)
