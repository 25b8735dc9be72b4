"""
Identity-provider token verification.

The rest of the board treats verification as a black box that turns an
opaque bearer credential into a ``VerifiedProfile`` or raises
``IdentityVerificationFailure``. The concrete verifier is chosen with
the ``IDENTITY_VERIFIER`` setting (dotted path).
"""

import logging
from dataclasses import dataclass

from django.conf import settings
from django.utils.module_loading import import_string
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from accounts.exceptions import IdentityVerificationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedProfile:
    name: str
    email: str
    picture_url: str = ""
    subject: str = ""


def verify_google_token(credential):
    """
    Verify a Google ID token against ``GOOGLE_CLIENT_ID``.
    """
    if not settings.GOOGLE_CLIENT_ID:
        raise IdentityVerificationFailure("GOOGLE_CLIENT_ID is not configured.")

    try:
        payload = id_token.verify_oauth2_token(
            credential,
            google_requests.Request(),
            settings.GOOGLE_CLIENT_ID,
        )
    except ValueError as exc:
        logger.warning("Error verifying Google ID token: %s", exc)
        raise IdentityVerificationFailure(str(exc)) from exc

    email = payload.get("email")
    if not email:
        raise IdentityVerificationFailure("Token payload has no email.")

    return VerifiedProfile(
        name=payload.get("name") or email,
        email=email,
        picture_url=payload.get("picture", ""),
        subject=payload.get("sub", ""),
    )


def verify_identity_token(credential):
    if not credential:
        raise IdentityVerificationFailure("ID token not provided.")

    verifier = import_string(settings.IDENTITY_VERIFIER)
    return verifier(credential)
