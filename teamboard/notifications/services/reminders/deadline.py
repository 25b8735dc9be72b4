"""
notifications/services/reminders/deadline.py

Deadline reminders for open tasks.

Schedule (calendar days between today and the deadline):
- past due  -> "overdue-<today>", a new kind every day until resolved
- 1 day     -> "dueIn1", once
- 3 days    -> "dueIn3", once
Anything else sends nothing.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass

from django.conf import settings
from django.utils import timezone
from django.utils.formats import date_format

from notifications.services.emitter import emit_reminder
from notifications.services.ledger import ReminderLedger
from tasks.models import Task

logger = logging.getLogger(__name__)

DUE_IN_1 = "dueIn1"
DUE_IN_3 = "dueIn3"
OVERDUE_PREFIX = "overdue-"

# Days remaining -> one-shot reminder kind
DEADLINE_MILESTONES = {
    1: DUE_IN_1,
    3: DUE_IN_3,
}

SIGNATURE = "Thanks,\nTeam Task Manager"


@dataclass
class DueReminder:
    task: Task
    kind: str
    subject: str
    body: str
    delivered: bool = False


def days_until(deadline, today):
    return (deadline - today).days


def classify_deadline(deadline, today):
    diff_days = days_until(deadline, today)

    if diff_days < 0:
        return f"{OVERDUE_PREFIX}{today.isoformat()}"

    return DEADLINE_MILESTONES.get(diff_days)


def compose_reminder(task, assignee, kind):
    deadline = date_format(task.deadline, "DATE_FORMAT")

    if kind.startswith(OVERDUE_PREFIX):
        subject = f'OVERDUE: Task "{task.title}"'
        text = (
            f'This is a daily reminder that your task "{task.title}" was due on '
            f"{deadline}. Please update its status as soon as possible."
        )
    elif kind == DUE_IN_1:
        subject = f'Reminder: Task "{task.title}" is due tomorrow'
        text = (
            f'This is a friendly reminder that your task "{task.title}" '
            f"is due tomorrow, {deadline}."
        )
    elif kind == DUE_IN_3:
        subject = f'Reminder: Task "{task.title}" is due in 3 days'
        text = (
            f'This is a friendly reminder that your task "{task.title}" '
            f"is due in 3 days, on {deadline}."
        )
    else:
        raise ValueError(f"Unknown reminder kind: {kind}")

    body = f"Hi {assignee.name},\n\n{text}\n\n{SIGNATURE}"
    return subject, body


def collect_due_reminders(*, ledger, today):
    """
    Reminders due today that the ledger has not seen yet.
    """
    sent = ledger.load()
    due = []

    tasks = (
        Task.objects
        .select_related("assignee")
        .exclude(status=Task.Status.DONE)
    )

    for task in tasks:
        assignee = task.assignee
        if assignee is None or not assignee.email:
            continue

        kind = classify_deadline(task.deadline, today)
        if kind is None:
            continue

        if kind in sent.get(str(task.pk), set()):
            continue

        subject, body = compose_reminder(task, assignee, kind)
        due.append(DueReminder(task=task, kind=kind, subject=subject, body=body))

    return due


def send_task_deadline_reminders(*, ledger=None, today=None, dry_run=False):
    """
    One full scan.

    Every due reminder is emitted (in-app + email), all email sends are
    awaited together, then every attempted pair is written to the ledger
    in a single update, whether or not its send succeeded.
    """
    ledger = ledger or ReminderLedger()
    today = today or timezone.localdate()

    due = collect_due_reminders(ledger=ledger, today=today)
    if not due or dry_run:
        return due

    workers = max(1, min(settings.REMINDER_EMAIL_WORKERS, len(due)))
    futures = {}

    try:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reminder-email") as executor:
            for reminder in due:
                try:
                    future = emit_reminder(
                        assignee=reminder.task.assignee,
                        task=reminder.task,
                        subject=reminder.subject,
                        body=reminder.body,
                        executor=executor,
                    )
                except Exception:
                    # Not dispatched: left out of the ledger, retried next tick
                    logger.exception(
                        "Could not dispatch %s reminder for task %s",
                        reminder.kind, reminder.task.pk,
                    )
                    continue
                futures[future] = reminder

            wait(futures)

        for future, reminder in futures.items():
            reminder.delivered = future.exception() is None and bool(future.result())
            if future.exception() is not None:
                logger.error(
                    "Reminder %s for task %s raised: %s",
                    reminder.kind, reminder.task.pk, future.exception(),
                )
    finally:
        ledger.mark_sent_many(
            (reminder.task.pk, reminder.kind) for reminder in futures.values()
        )

    failed = sum(1 for reminder in due if not reminder.delivered)
    logger.info(
        "Deadline scan for %s: %d reminders attempted, %d failed",
        today, len(futures), failed,
    )
    return due
