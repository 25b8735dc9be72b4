import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from accounts.exceptions import StructuralInvariantViolation
from accounts.models import User
from tasks.models import Task

logger = logging.getLogger(__name__)

LAST_ADMIN_REASON = "You cannot delete the last admin user."
LAST_ADMIN_DEMOTION_REASON = "You cannot remove the admin role from the last admin user."
HAS_TASKS_REASON = "Cannot delete user. Reassign their tasks first."

USER_UPDATE_FIELDS = ("name", "email", "role", "avatar_url")


def _normalize_email(email):
    return (email or "").strip().lower()


def _locked_admin_count():
    # Lock the admin rows themselves; FOR UPDATE cannot wrap COUNT(*)
    admin_ids = list(
        User.objects.select_for_update()
        .filter(role=User.Role.ADMIN)
        .values_list("pk", flat=True)
    )
    return len(admin_ids)


def find_user_by_id(user_id):
    return User.objects.filter(pk=user_id).first()


def find_user_by_email(email):
    return User.objects.filter(email__iexact=_normalize_email(email)).first()


# ============================================================
# CREATE
# ============================================================

@transaction.atomic
def create_user(*, name, email, password=None, role=User.Role.MEMBER, avatar_url=""):
    """
    Signup / admin creation.

    - Email is unique (case-insensitive) and doubles as the username
    - Users without a password get an unusable one (identity-provider logins)
    """
    email = _normalize_email(email)

    if not name or not email:
        raise ValidationError("Please fill out all fields.")

    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError("An account with this email already exists.")

    user = User(
        username=email,
        email=email,
        name=name.strip(),
        role=role,
        avatar_url=avatar_url or "",
    )

    if password:
        user.set_password(password)
    else:
        user.set_unusable_password()

    user.full_clean()
    user.save()

    if not user.avatar_url:
        user.avatar_url = user.default_avatar_url()
        user.save(update_fields=["avatar_url"])

    logger.info("Created user %s with role %s", user.pk, user.role)
    return user


@transaction.atomic
def find_or_create_identity_user(profile):
    """
    Resolve a verified identity-provider profile to a board user.

    Existing users (matched by email) get their name and avatar
    refreshed; unknown emails become new members.
    Returns ``(user, created)``.
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=_normalize_email(profile.email))
        .first()
    )

    if user is not None:
        user.name = profile.name
        if profile.picture_url:
            user.avatar_url = profile.picture_url
        user.save(update_fields=["name", "avatar_url"])
        return user, False

    user = create_user(
        name=profile.name,
        email=profile.email,
        role=User.Role.MEMBER,
        avatar_url=profile.picture_url,
    )
    return user, True


# ============================================================
# UPDATE
# ============================================================

@transaction.atomic
def update_user(user_id, changes):
    """
    Apply a partial update to a user.

    Raises ``User.DoesNotExist`` for unknown ids and
    ``StructuralInvariantViolation`` when the last admin would be demoted.
    """
    unknown = set(changes) - set(USER_UPDATE_FIELDS)
    if unknown:
        raise ValidationError(f"Unsupported user fields: {', '.join(sorted(unknown))}")

    user = User.objects.select_for_update().get(pk=user_id)

    new_role = changes.get("role", user.role)
    if user.is_admin and new_role != User.Role.ADMIN:
        admin_count = _locked_admin_count()
        if admin_count <= 1:
            raise StructuralInvariantViolation(LAST_ADMIN_DEMOTION_REASON)

    if "email" in changes:
        email = _normalize_email(changes["email"])
        taken = (
            User.objects
            .filter(email__iexact=email)
            .exclude(pk=user.pk)
            .exists()
        )
        if taken:
            raise ValidationError("An account with this email already exists.")
        user.email = email
        user.username = email

    for field in ("name", "role", "avatar_url"):
        if field in changes:
            setattr(user, field, changes[field])

    user.full_clean()
    user.save()
    return user


# ============================================================
# DELETE
# ============================================================

@transaction.atomic
def delete_user(user_id):
    """
    Delete a user, enforcing the structural invariants:

    - at least one admin must remain
    - users still assigned to or owning tasks are kept

    Nothing is changed when a rule is violated.
    """
    user = User.objects.select_for_update().get(pk=user_id)

    if user.is_admin:
        admin_count = _locked_admin_count()
        if admin_count <= 1:
            raise StructuralInvariantViolation(LAST_ADMIN_REASON)

    has_tasks = Task.objects.filter(
        Q(assignee=user) | Q(creator=user)
    ).exists()
    if has_tasks:
        raise StructuralInvariantViolation(HAS_TASKS_REASON)

    name = user.name
    user.delete()

    logger.info("Deleted user %s (%s)", user_id, name)
    return name
