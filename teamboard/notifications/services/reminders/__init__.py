"""
Reminder notification service layer.

Time-based reminder emitters triggered by the deadline scanner
(APScheduler job) or the ``send_deadline_reminders`` command.

Reminder logic is:
- service-layer only
- calendar-date based
- deduplicated through the reminder ledger
"""

from .deadline import (
    DUE_IN_1,
    DUE_IN_3,
    DueReminder,
    classify_deadline,
    compose_reminder,
    send_task_deadline_reminders,
)

__all__ = [
    "DUE_IN_1",
    "DUE_IN_3",
    "DueReminder",
    "classify_deadline",
    "compose_reminder",
    "send_task_deadline_reminders",
]
