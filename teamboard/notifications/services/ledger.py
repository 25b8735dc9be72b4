"""
Reminder de-duplication ledger.

Records which (task, reminder kind) pairs have already been dispatched.
The whole mapping is serialized as JSON under one key of the durable
key-value table:

    {"12": ["dueIn3", "dueIn1"], "15": ["overdue-2024-05-01"]}

Unreadable storage loads as empty, so a broken ledger leads to
re-sending rather than silence.
"""

import json
import logging
import threading

from django.conf import settings
from django.db import transaction

from notifications.models import StoredValue

logger = logging.getLogger(__name__)

_write_lock = threading.Lock()


class KeyValueStore:
    """get/set over ``StoredValue`` rows."""

    def get(self, key, *, for_update=False):
        qs = StoredValue.objects.filter(key=key)
        if for_update:
            qs = qs.select_for_update()
        row = qs.first()
        return row.value if row else None

    def set(self, key, value):
        StoredValue.objects.update_or_create(key=key, defaults={"value": value})


def _decode(raw):
    if raw is None:
        return {}

    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Reminder ledger is not valid JSON, resetting to empty")
        return {}

    if not isinstance(data, dict):
        logger.warning("Reminder ledger is not a mapping, resetting to empty")
        return {}

    ledger = {}
    for task_id, kinds in data.items():
        if not isinstance(kinds, list) or not all(isinstance(k, str) for k in kinds):
            logger.warning("Reminder ledger entry for task %s is malformed, resetting to empty", task_id)
            return {}
        ledger[str(task_id)] = set(kinds)

    return ledger


def _encode(ledger):
    return json.dumps(
        {task_id: sorted(kinds) for task_id, kinds in sorted(ledger.items())}
    )


class ReminderLedger:
    def __init__(self, store=None, key=None):
        self.store = store or KeyValueStore()
        self.key = key or settings.REMINDER_LEDGER_KEY

    def load(self):
        return _decode(self.store.get(self.key))

    def has_sent(self, task_id, kind):
        return kind in self.load().get(str(task_id), set())

    def pairs(self):
        return {
            (task_id, kind)
            for task_id, kinds in self.load().items()
            for kind in kinds
        }

    def mark_sent(self, task_id, kind):
        self.mark_sent_many([(task_id, kind)])

    def mark_sent_many(self, pairs):
        """
        Append every (task_id, kind) pair in one read-modify-write.
        """
        pairs = [(str(task_id), kind) for task_id, kind in pairs]
        if not pairs:
            return

        with _write_lock, transaction.atomic():
            ledger = _decode(self.store.get(self.key, for_update=True))

            for task_id, kind in pairs:
                ledger.setdefault(task_id, set()).add(kind)

            self.store.set(self.key, _encode(ledger))

        logger.debug("Reminder ledger updated with %d entries", len(pairs))
