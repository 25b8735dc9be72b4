from datetime import timedelta

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from django.contrib.sessions.models import Session
from django.core import mail
from django.test import Client
from django.utils import timezone

from accounts.context import BoardContext
from notifications.models import Notification
from notifications.scheduler import JOB_ID, DeadlineScanner
from notifications.services.emitter import notify

pytestmark = pytest.mark.django_db


@pytest.fixture
def scanner():
    scanner = DeadlineScanner(BoardContext())
    yield scanner
    scanner.shutdown()


@pytest.fixture
def live_scanner(settings, monkeypatch):
    """
    The process scanner with a real, idle-until-later job.
    """
    settings.ENABLE_SCHEDULER = True
    settings.REMINDER_INITIAL_DELAY_SECONDS = 3600

    scanner = DeadlineScanner(
        BoardContext(), scheduler=BackgroundScheduler(timezone="UTC"),
    )
    monkeypatch.setattr("notifications.scheduler._scanner", scanner)
    yield scanner
    scanner.shutdown()


def test_tick_is_skipped_without_session(scanner, member, make_task, today):
    make_task(assignee=member, days=1)

    assert scanner.tick(today=today) == []
    assert mail.outbox == []


def test_tick_scans_while_session_active(scanner, client, member, make_task, today):
    make_task(assignee=member, days=1)
    client.force_login(member)

    reminders = scanner.tick(today=today)

    assert len(reminders) == 1
    assert len(mail.outbox) == 1
    assert scanner.tick(today=today) == []


def test_tick_stops_after_logout(scanner, client, member, make_task, today):
    make_task(assignee=member, days=-1)
    client.force_login(member)
    client.logout()

    assert scanner.tick(today=today) == []
    assert mail.outbox == []


def test_expired_session_is_not_active(scanner, client, member, make_task, today):
    make_task(assignee=member, days=1)
    client.force_login(member)
    Session.objects.update(expire_date=timezone.now() - timedelta(seconds=1))

    assert scanner.context.is_active is False
    assert scanner.tick(today=today) == []


def test_tick_purges_expired_notifications(scanner, client, member):
    expired = notify("old", recipient=member)
    Notification.objects.filter(pk=expired.pk).update(
        expires_at=timezone.now() - timedelta(seconds=1)
    )
    fresh = notify("fresh", recipient=member)
    client.force_login(member)

    scanner.tick()

    assert list(Notification.objects.values_list("pk", flat=True)) == [fresh.pk]


def test_start_is_noop_when_disabled(scanner):
    assert scanner.start() is False
    assert scanner.ensure_started() is False
    assert scanner.is_scheduled is False


def test_start_stop_registers_a_single_job(settings):
    settings.ENABLE_SCHEDULER = True
    settings.REMINDER_INITIAL_DELAY_SECONDS = 3600

    scheduler = BackgroundScheduler(timezone="UTC")
    scanner = DeadlineScanner(BoardContext(), scheduler=scheduler)

    try:
        assert scanner.start() is True
        assert scanner.start() is True

        jobs = scheduler.get_jobs()
        assert [job.id for job in jobs] == [JOB_ID]

        assert scanner.stop() is True
        assert scheduler.get_job(JOB_ID) is None
        assert scanner.stop() is False

        scanner.start()
        assert len(scheduler.get_jobs()) == 1
    finally:
        scanner.shutdown()


def test_idle_tick_removes_the_job(live_scanner, member):
    live_scanner.start()

    assert live_scanner.tick() == []
    assert live_scanner.is_scheduled is False


def test_ensure_started_keeps_existing_run_time(live_scanner):
    live_scanner.start()
    first_run = live_scanner.scheduler.get_job(JOB_ID).next_run_time

    assert live_scanner.ensure_started() is False
    assert live_scanner.scheduler.get_job(JOB_ID).next_run_time == first_run


def test_last_logout_removes_the_job(live_scanner, client, member, other_member):
    other = Client()

    client.force_login(member)
    other.force_login(other_member)
    assert live_scanner.is_scheduled

    client.logout()
    assert live_scanner.is_scheduled

    other.logout()
    assert live_scanner.is_scheduled is False
    assert live_scanner.scheduler.get_job(JOB_ID) is None


def test_authenticated_request_resumes_scanner(live_scanner, client, member):
    client.force_login(member)
    live_scanner.stop()

    client.get("/api/notifications/")

    assert live_scanner.is_scheduled


def test_board_context_reads_session_table(client, member, other_member):
    context = BoardContext()
    assert context.is_active is False

    client.force_login(member)
    Client().force_login(other_member)

    assert context.active_user_ids == frozenset({member.pk, other_member.pk})

    client.logout()
    assert context.active_user_ids == frozenset({other_member.pk})
