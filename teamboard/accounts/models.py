from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Board member.

    The username is always the lowercased email so Django's
    authentication backend can log users in by email.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        MEMBER = "member", "User"
        VIEWER = "viewer", "Viewer"

    name = models.CharField(max_length=150)

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.MEMBER,
        db_index=True,
    )

    avatar_url = models.URLField(max_length=500, blank=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self):
        return f"{self.name} ({self.email})" if self.name else self.email

    # =====================================================
    # ROLE HELPERS
    # =====================================================
    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_viewer(self):
        return self.role == self.Role.VIEWER

    def default_avatar_url(self):
        return f"https://i.pravatar.cc/150?u=user-{self.pk}"
