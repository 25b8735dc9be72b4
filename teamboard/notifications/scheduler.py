from datetime import timedelta
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from accounts.context import get_board_context
from notifications.services.emitter import purge_expired_notifications
from notifications.services.ledger import ReminderLedger
from notifications.services.reminders.deadline import send_task_deadline_reminders

logger = logging.getLogger(__name__)

JOB_ID = "scan_task_deadlines"


class DeadlineScanner:
    """
    Session-scoped deadline scanner.

    - One interval job, first run shortly after start
    - Re-starting replaces the job instead of adding a second timer
    - Ticks are skipped, and the job removed, while nobody is signed in
    """

    def __init__(self, context, scheduler=None, ledger=None):
        self.context = context
        self.scheduler = scheduler
        self.ledger = ledger or ReminderLedger()

    def _ensure_scheduler(self):
        if self.scheduler is None:
            self.scheduler = BackgroundScheduler(timezone=settings.TIME_ZONE)

        if not self.scheduler.running:
            self.scheduler.start()

        return self.scheduler

    @property
    def is_scheduled(self):
        return (
            self.scheduler is not None
            and self.scheduler.get_job(JOB_ID) is not None
        )

    def start(self):
        # --------------------------------------------
        # DEV / PROD TOGGLE
        # --------------------------------------------
        if not getattr(settings, "ENABLE_SCHEDULER", False):
            logger.info("Deadline scanner disabled via settings (ENABLE_SCHEDULER=False)")
            return False

        scheduler = self._ensure_scheduler()

        scheduler.add_job(
            self.run,
            trigger="interval",
            seconds=settings.REMINDER_SCAN_INTERVAL_SECONDS,
            next_run_time=timezone.now() + timedelta(
                seconds=settings.REMINDER_INITIAL_DELAY_SECONDS
            ),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,      # Prevent overlapping ticks
            coalesce=True,        # Merge missed ticks
        )

        logger.info(
            "Deadline scanner started: every %ss, first run in %ss",
            settings.REMINDER_SCAN_INTERVAL_SECONDS,
            settings.REMINDER_INITIAL_DELAY_SECONDS,
        )
        return True

    def stop(self):
        if not self.is_scheduled:
            return False

        self.scheduler.remove_job(JOB_ID)
        logger.info("Deadline scanner stopped")
        return True

    def shutdown(self):
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.scheduler = None

    def ensure_started(self):
        """
        Start the job if this process is not running it yet.
        Unlike ``start`` this keeps an existing job's next run time.
        """
        if not getattr(settings, "ENABLE_SCHEDULER", False) or self.is_scheduled:
            return False
        return self.start()

    def tick(self, today=None):
        # Sessions can end without a logout (expiry, another worker),
        # so an idle tick also takes the job down.
        if not self.context.is_active:
            logger.debug("No active session, skipping deadline scan")
            self.stop()
            return []

        purge_expired_notifications()
        return send_task_deadline_reminders(ledger=self.ledger, today=today)

    def run(self):
        """
        Scheduler entry point. Runs on an APScheduler worker thread,
        so stale connections are closed around the tick.
        """
        close_old_connections()
        try:
            self.tick()
        except Exception:
            logger.exception("Deadline scan failed")
        finally:
            close_old_connections()


# ============================================================
# GLOBAL SAFETY LOCK
# One scanner per process
# ============================================================
_scanner = None


def get_scanner():
    global _scanner

    if _scanner is None:
        _scanner = DeadlineScanner(get_board_context())

    return _scanner
