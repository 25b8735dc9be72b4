"""
Error taxonomy shared by the board services.

Missing or malformed input is reported with Django's own
``ValidationError``; the classes below cover the remaining cases.
"""

from django.core.exceptions import PermissionDenied


class PolicyDenied(PermissionDenied):
    """The actor's role or relationship does not allow the action."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class StructuralInvariantViolation(Exception):
    """A mutation would break a rule that must always hold (last admin, task ownership)."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class IdentityVerificationFailure(Exception):
    """The identity-provider credential is missing, malformed or rejected."""
