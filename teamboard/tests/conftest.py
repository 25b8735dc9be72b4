from datetime import date, timedelta

import pytest

from accounts.context import get_board_context
from accounts.models import User
from accounts.services.user_service import create_user
from tasks.services.task_service import add_task

TODAY = date(2024, 5, 1)


@pytest.fixture(autouse=True)
def _board_settings(settings):
    settings.ENABLE_SCHEDULER = False
    settings.REMINDER_LEDGER_KEY = "sentReminders"
    settings.NOTIFICATION_DISPLAY_SECONDS = 8
    settings.IDENTITY_VERIFIER = "tests.fakes.fake_verifier"


@pytest.fixture
def board_context(db):
    return get_board_context()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def admin(db):
    return create_user(
        name="Alex Ray", email="alex@example.com",
        password="password123", role=User.Role.ADMIN,
    )


@pytest.fixture
def member(db):
    return create_user(
        name="Jordan Lee", email="jordan@example.com",
        password="password123", role=User.Role.MEMBER,
    )


@pytest.fixture
def other_member(db):
    return create_user(
        name="Taylor Kim", email="taylor@example.com",
        password="password123", role=User.Role.MEMBER,
    )


@pytest.fixture
def viewer(db):
    return create_user(
        name="Sam Viewer", email="sam@example.com",
        password="password123", role=User.Role.VIEWER,
    )


@pytest.fixture
def make_task(db, admin):
    def _make(*, assignee, creator=None, days=5, today=TODAY, title="Write docs", **changes):
        task = add_task(
            creator=creator or admin,
            title=title,
            description="Document the onboarding flow.",
            assignee=assignee,
            deadline=today + timedelta(days=days),
        )
        if changes:
            for field, value in changes.items():
                setattr(task, field, value)
            task.save()
        return task

    return _make
