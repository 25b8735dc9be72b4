from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"

    def ready(self):
        # --------------------------------------------------
        # Load signals (REQUIRED)
        # Session signals start/stop the deadline scanner
        # --------------------------------------------------
        import notifications.signals.session  # noqa
