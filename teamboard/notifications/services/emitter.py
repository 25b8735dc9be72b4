"""
Notification emitter.

Two channels:
- in-app: short-lived ``Notification`` rows the UI polls
- email: handed to ``send_reminder_email`` on a worker thread so a tick
  can wait for every send at once
"""

import logging

from django.utils import timezone

from notifications.models import Notification
from notifications.services import email as email_service

logger = logging.getLogger(__name__)


def notify(message, *, kind=Notification.Kind.SUCCESS, recipient=None, task=None):
    return Notification.objects.create(
        recipient=recipient,
        kind=kind,
        message=message,
        task=task,
    )


def visible_notifications(user):
    return Notification.objects.for_user(user).visible()


def dismiss_notification(notification_id, *, user):
    notification = (
        Notification.objects
        .for_user(user)
        .filter(pk=notification_id)
        .first()
    )
    if notification is None:
        return False

    notification.dismiss()
    return True


def purge_expired_notifications(now=None):
    deleted, _ = Notification.objects.expired(now or timezone.now()).delete()
    return deleted


def emit_reminder(*, assignee, task, subject, body, executor):
    """
    Submit the email and show an in-app reminder.
    Returns the email future (resolves to True/False).

    Once the email is submitted the reminder counts as dispatched,
    so a failing in-app notification is logged, not raised.
    """
    future = executor.submit(
        email_service.send_reminder_email,
        to_name=assignee.name,
        to_email=assignee.email,
        subject=subject,
        body=body,
    )

    try:
        notify(subject, kind=Notification.Kind.REMINDER, recipient=assignee, task=task)
    except Exception:
        logger.exception("In-app reminder for task %s could not be created", task.pk)

    return future
