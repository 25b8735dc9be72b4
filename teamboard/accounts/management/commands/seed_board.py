from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from accounts.services.user_service import create_user, find_user_by_email
from tasks.models import Task
from tasks.services.task_service import add_task, update_task

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("Alex Ray", "alex@example.com", User.Role.ADMIN),
    ("Jordan Lee", "jordan@example.com", User.Role.MEMBER),
    ("Taylor Kim", "taylor@example.com", User.Role.MEMBER),
    ("Casey Morgan", "casey@example.com", User.Role.MEMBER),
    ("Sam Viewer", "sam@example.com", User.Role.VIEWER),
]

# (title, description, assignee, creator, days from today, status, priority, score)
DEMO_TASKS = [
    (
        "Design new dashboard UI",
        "Create mockups and a prototype for the new v2 dashboard, focusing on "
        "user experience and data visualization.",
        "jordan@example.com", "alex@example.com", 5,
        Task.Status.IN_PROGRESS, Task.Priority.HIGH, None,
    ),
    (
        "Develop API endpoint for user authentication",
        "Implement JWT-based authentication for the main API gateway. "
        "Include refresh token logic.",
        "taylor@example.com", "alex@example.com", 10,
        Task.Status.TODO, Task.Priority.HIGH, None,
    ),
    (
        "Write documentation for the onboarding flow",
        "Document the entire user onboarding process for the new help center. "
        "Include screenshots and code examples.",
        "casey@example.com", "jordan@example.com", -1,
        Task.Status.IN_PROGRESS, Task.Priority.MEDIUM, None,
    ),
    (
        "Fix login button bug on mobile",
        "The login button is not rendering correctly on Safari mobile. "
        "Investigate and deploy a hotfix.",
        "taylor@example.com", "alex@example.com", 1,
        Task.Status.TODO, Task.Priority.HIGH, None,
    ),
    (
        "Review Q3 marketing campaign results",
        "Analyze the performance metrics from the Q3 campaign and prepare a "
        "presentation for the stakeholders meeting.",
        "alex@example.com", "alex@example.com", -5,
        Task.Status.DONE, Task.Priority.LOW, 95,
    ),
]


class Command(BaseCommand):
    help = "Load the demo users and tasks (skips users that already exist)"

    @transaction.atomic
    def handle(self, *args, **options):
        today = timezone.localdate()
        created_users = 0

        for name, email, role in DEMO_USERS:
            if find_user_by_email(email):
                continue
            create_user(name=name, email=email, password=DEMO_PASSWORD, role=role)
            created_users += 1

        if created_users == 0:
            self.stdout.write(self.style.WARNING("Demo users already exist, nothing to do."))
            return

        for title, description, assignee, creator, offset, status, priority, score in DEMO_TASKS:
            task = add_task(
                creator=find_user_by_email(creator),
                title=title,
                description=description,
                assignee=find_user_by_email(assignee),
                deadline=today + timedelta(days=offset),
                priority=priority,
            )
            if status != Task.Status.TODO:
                update_task(task.pk, {"status": status, "score": score})

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {created_users} users and {len(DEMO_TASKS)} tasks."
            )
        )
