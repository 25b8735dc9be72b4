from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


def _default_expiry():
    return timezone.now() + timedelta(seconds=settings.NOTIFICATION_DISPLAY_SECONDS)


class NotificationQuerySet(models.QuerySet):
    def visible(self, now=None):
        now = now or timezone.now()
        return self.filter(is_dismissed=False, expires_at__gt=now)

    def expired(self, now=None):
        now = now or timezone.now()
        return self.filter(expires_at__lte=now)

    def for_user(self, user):
        return self.filter(
            models.Q(recipient=user) | models.Q(recipient__isnull=True)
        )


class Notification(models.Model):
    """
    A transient, user-facing alert.

    Notifications are shown for a fixed display duration
    (``NOTIFICATION_DISPLAY_SECONDS``) or until dismissed.
    A notification without a recipient is shown to everyone.
    """

    # =====================================================
    # KIND
    # =====================================================
    class Kind(models.TextChoices):
        SUCCESS = "success", "Success"
        REMINDER = "reminder", "Reminder"

    # =====================================================
    # CORE RELATIONSHIPS
    # =====================================================
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
        help_text="User who sees this notification (empty = everyone)",
    )

    task = models.ForeignKey(
        "tasks.Task",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
    )

    # =====================================================
    # CONTENT
    # =====================================================
    kind = models.CharField(
        max_length=20,
        choices=Kind.choices,
        default=Kind.SUCCESS,
        db_index=True,
    )

    message = models.TextField()

    # =====================================================
    # STATE
    # =====================================================
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    expires_at = models.DateTimeField(default=_default_expiry, db_index=True)

    is_dismissed = models.BooleanField(default=False, db_index=True)
    dismissed_at = models.DateTimeField(null=True, blank=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["recipient", "is_dismissed"], name="notif_recipient_dismissed_idx"),
        ]

    def __str__(self):
        return f"{self.recipient or 'everyone'} | {self.kind.upper()} | {self.message[:40]}"

    def dismiss(self):
        if not self.is_dismissed:
            self.is_dismissed = True
            self.dismissed_at = timezone.now()
            self.save(update_fields=["is_dismissed", "dismissed_at"])


class StoredValue(models.Model):
    """
    Durable key-value entry. Holds serialized state such as the
    reminder ledger under a single well-known key.
    """

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key
