"""
Notification service layer.

- emitter: in-app notifications and reminder dispatch
- email: outbound email transport wrapper
- ledger: durable record of reminders already sent
- reminders: deadline scanning

Permission checks happen before these functions are called.
"""

# =====================================================
# EMITTER
# =====================================================
from .emitter import (
    notify,
    visible_notifications,
    dismiss_notification,
    purge_expired_notifications,
    emit_reminder,
)

# =====================================================
# LEDGER
# =====================================================
from .ledger import (
    KeyValueStore,
    ReminderLedger,
)

# =====================================================
# PUBLIC EXPORTS
# =====================================================
__all__ = [
    # Emitter
    "notify",
    "visible_notifications",
    "dismiss_notification",
    "purge_expired_notifications",
    "emit_reminder",

    # Ledger
    "KeyValueStore",
    "ReminderLedger",
]
