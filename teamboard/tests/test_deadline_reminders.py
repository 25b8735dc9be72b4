from datetime import date, timedelta
from io import StringIO

import pytest
from django.core import mail
from django.core.management import call_command
from django.utils import timezone

from notifications.models import Notification
from notifications.services import emitter
from notifications.services.ledger import ReminderLedger
from notifications.services.reminders import deadline
from notifications.services.reminders.deadline import (
    DUE_IN_1,
    DUE_IN_3,
    classify_deadline,
    compose_reminder,
    send_task_deadline_reminders,
)
from tasks.models import Task

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize(
    "days, expected",
    [
        (-3, "overdue-2024-05-01"),
        (-1, "overdue-2024-05-01"),
        (0, None),
        (1, DUE_IN_1),
        (2, None),
        (3, DUE_IN_3),
        (4, None),
        (7, None),
    ],
)
def test_classify_deadline_is_sparse(days, expected, today):
    assert classify_deadline(today + timedelta(days=days), today) == expected


def test_compose_due_tomorrow(member, make_task):
    task = make_task(assignee=member, title="Fix login button", days=1)

    subject, body = compose_reminder(task, member, DUE_IN_1)

    assert subject == 'Reminder: Task "Fix login button" is due tomorrow'
    assert body.startswith("Hi Jordan Lee,\n\n")
    assert body.endswith("Thanks,\nTeam Task Manager")


def test_compose_overdue(member, make_task):
    task = make_task(assignee=member, title="Write docs", days=-1)

    subject, body = compose_reminder(task, member, "overdue-2024-05-01")

    assert subject == 'OVERDUE: Task "Write docs"'
    assert "daily reminder" in body


def test_due_in_one_and_three_days_send_once(member, make_task, today):
    make_task(assignee=member, days=1, title="Tomorrow")
    make_task(assignee=member, days=3, title="In three")
    make_task(assignee=member, days=2, title="In two")

    first = send_task_deadline_reminders(today=today)

    assert sorted(r.kind for r in first) == [DUE_IN_1, DUE_IN_3]
    assert all(r.delivered for r in first)
    assert len(mail.outbox) == 2
    assert {m.to[0] for m in mail.outbox} == {"jordan@example.com"}
    assert Notification.objects.filter(kind=Notification.Kind.REMINDER, recipient=member).count() == 2

    second = send_task_deadline_reminders(today=today)

    assert second == []
    assert len(mail.outbox) == 2


def test_deadline_today_sends_nothing(member, make_task, today):
    make_task(assignee=member, days=0)

    assert send_task_deadline_reminders(today=today) == []
    assert mail.outbox == []


def test_overdue_reminds_once_per_day(member, make_task, today):
    task = make_task(assignee=member, days=-1, status=Task.Status.IN_PROGRESS)

    day_one = send_task_deadline_reminders(today=today)
    assert [r.kind for r in day_one] == ["overdue-2024-05-01"]

    assert send_task_deadline_reminders(today=today) == []

    next_day = today + timedelta(days=1)
    day_two = send_task_deadline_reminders(today=next_day)
    assert [r.kind for r in day_two] == ["overdue-2024-05-02"]

    assert ReminderLedger().pairs() == {
        (str(task.pk), "overdue-2024-05-01"),
        (str(task.pk), "overdue-2024-05-02"),
    }


def test_due_in_reminders_are_one_shot_forever(member, make_task, today):
    task = make_task(assignee=member, days=1)
    ReminderLedger().mark_sent(task.pk, DUE_IN_1)

    assert send_task_deadline_reminders(today=today) == []


def test_done_tasks_are_skipped(member, make_task, today):
    make_task(assignee=member, days=-2, status=Task.Status.DONE)
    make_task(assignee=member, days=1, status=Task.Status.DONE)

    assert send_task_deadline_reminders(today=today) == []


def test_assignee_without_email_is_skipped(member, make_task, today):
    make_task(assignee=member, days=3)
    member.email = ""
    member.save(update_fields=["email"])

    assert send_task_deadline_reminders(today=today) == []


def test_failed_send_is_still_marked(member, make_task, today, monkeypatch):
    task = make_task(assignee=member, days=3)

    def broken_send_mail(**kwargs):
        raise OSError("SMTP down")

    monkeypatch.setattr("notifications.services.email.send_mail", broken_send_mail)

    reminders = send_task_deadline_reminders(today=today)

    assert len(reminders) == 1
    assert reminders[0].delivered is False
    assert ReminderLedger().has_sent(task.pk, DUE_IN_3)
    assert send_task_deadline_reminders(today=today) == []


def test_ledger_is_committed_once_after_all_sends(member, other_member, make_task, today, monkeypatch):
    make_task(assignee=member, days=1)
    make_task(assignee=other_member, days=3)

    commits = []
    original = ReminderLedger.mark_sent_many

    def recording_mark(self, pairs):
        pairs = list(pairs)
        commits.append((pairs, len(mail.outbox)))
        return original(self, pairs)

    monkeypatch.setattr(ReminderLedger, "mark_sent_many", recording_mark)

    send_task_deadline_reminders(today=today)

    assert len(commits) == 1
    pairs, sent_before_commit = commits[0]
    assert len(pairs) == 2
    assert sent_before_commit == 2


def test_dry_run_neither_sends_nor_records(member, make_task, today):
    make_task(assignee=member, days=1)

    reminders = send_task_deadline_reminders(today=today, dry_run=True)

    assert [r.kind for r in reminders] == [DUE_IN_1]
    assert mail.outbox == []
    assert ReminderLedger().pairs() == set()


def test_send_deadline_reminders_command(member, make_task):
    make_task(assignee=member, days=3, today=timezone.localdate())
    out = StringIO()

    call_command("send_deadline_reminders", stdout=out)

    assert "1 reminders, 0 failed" in out.getvalue()
    assert len(mail.outbox) == 1


def test_overdue_kind_uses_iso_date():
    assert classify_deadline(date(2024, 4, 30), date(2024, 5, 2)) == "overdue-2024-05-02"


def test_in_app_failure_still_records_sent_email(member, other_member, make_task, today, monkeypatch):
    first = make_task(assignee=member, days=1)
    second = make_task(assignee=other_member, days=3)

    real_notify = emitter.notify
    calls = []

    def flaky_notify(*args, **kwargs):
        calls.append(kwargs.get("task"))
        if len(calls) == 2:
            raise RuntimeError("notification table locked")
        return real_notify(*args, **kwargs)

    monkeypatch.setattr("notifications.services.emitter.notify", flaky_notify)

    reminders = send_task_deadline_reminders(today=today)

    assert len(mail.outbox) == 2
    assert all(r.delivered for r in reminders)
    assert Notification.objects.filter(kind=Notification.Kind.REMINDER).count() == 1
    assert ReminderLedger().pairs() == {
        (str(first.pk), DUE_IN_1),
        (str(second.pk), DUE_IN_3),
    }
    assert send_task_deadline_reminders(today=today) == []


def test_undispatched_reminder_is_left_for_next_tick(member, other_member, make_task, today, monkeypatch):
    sent = make_task(assignee=member, days=1)
    broken = make_task(assignee=other_member, days=3)

    real_emit = deadline.emit_reminder

    def failing_emit(**kwargs):
        if kwargs["task"].pk == broken.pk:
            raise RuntimeError("executor rejected")
        return real_emit(**kwargs)

    monkeypatch.setattr(deadline, "emit_reminder", failing_emit)

    reminders = send_task_deadline_reminders(today=today)

    assert {r.task.pk: r.delivered for r in reminders} == {sent.pk: True, broken.pk: False}
    assert ReminderLedger().pairs() == {(str(sent.pk), DUE_IN_1)}

    monkeypatch.setattr(deadline, "emit_reminder", real_emit)

    retried = send_task_deadline_reminders(today=today)
    assert [r.task.pk for r in retried] == [broken.pk]
