import json

import pytest

from notifications.models import StoredValue
from notifications.services.ledger import KeyValueStore, ReminderLedger

pytestmark = pytest.mark.django_db


def test_round_trip_preserves_pairs():
    ledger = ReminderLedger()
    pairs = {("1", "dueIn3"), ("1", "dueIn1"), ("7", "overdue-2024-05-01")}

    ledger.mark_sent_many(pairs)

    assert ReminderLedger().pairs() == pairs


def test_mark_sent_is_idempotent():
    ledger = ReminderLedger()

    ledger.mark_sent(3, "dueIn1")
    ledger.mark_sent(3, "dueIn1")

    assert json.loads(KeyValueStore().get("sentReminders")) == {"3": ["dueIn1"]}
    assert ledger.has_sent(3, "dueIn1")
    assert ledger.has_sent("3", "dueIn1")
    assert not ledger.has_sent(3, "dueIn3")


def test_missing_storage_loads_empty():
    assert ReminderLedger().load() == {}


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps(["dueIn1"]),
        json.dumps({"1": "dueIn1"}),
        json.dumps({"1": [1, 2]}),
    ],
)
def test_corrupt_storage_resets_to_empty(raw):
    StoredValue.objects.create(key="sentReminders", value=raw)

    ledger = ReminderLedger()

    assert ledger.load() == {}
    assert not ledger.has_sent(1, "dueIn1")


def test_corrupt_storage_is_overwritten_on_next_mark():
    StoredValue.objects.create(key="sentReminders", value="garbage")

    ReminderLedger().mark_sent(2, "dueIn3")

    assert ReminderLedger().pairs() == {("2", "dueIn3")}


def test_ledger_key_is_configurable(settings):
    settings.REMINDER_LEDGER_KEY = "otherLedger"

    ReminderLedger().mark_sent(1, "dueIn1")

    assert StoredValue.objects.filter(key="otherLedger").exists()
    assert not StoredValue.objects.filter(key="sentReminders").exists()
