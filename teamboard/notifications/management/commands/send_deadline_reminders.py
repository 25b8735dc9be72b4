"""
notifications/management/commands/send_deadline_reminders.py

Runs one deadline scan immediately, independent of signed-in sessions.

Use it from cron or by hand as a catch-all; reminders are
deduplicated through the ledger, so repeated runs are safe.
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from notifications.services.reminders.deadline import send_task_deadline_reminders


class Command(BaseCommand):
    help = "Send task deadline reminders (overdue, due tomorrow, due in 3 days)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List reminders that are due without sending or recording them",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        dry_run = options["dry_run"]

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Starting deadline scan"
                + (" (dry run)" if dry_run else "")
            )
        )

        reminders = send_task_deadline_reminders(dry_run=dry_run)

        for reminder in reminders:
            self.stdout.write(
                f"  task {reminder.task.pk} [{reminder.kind}] -> "
                f"{reminder.task.assignee.email}"
            )

        failed = sum(1 for r in reminders if not dry_run and not r.delivered)

        self.stdout.write(
            self.style.SUCCESS(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed: "
                f"{len(reminders)} reminders, {failed} failed"
            )
        )
