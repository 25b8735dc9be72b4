import logging

from django.contrib.auth import SESSION_KEY
from django.contrib.sessions.models import Session
from django.utils import timezone

logger = logging.getLogger(__name__)


class BoardContext:
    """
    Application context for signed-in sessions.

    Backed by Django's session table, so it agrees with what the
    login-required middleware sees: a session that expired, was
    deleted, or was closed by another worker process no longer counts.
    Components that only make sense while someone is using the board
    (the deadline scanner) receive this object and ask it whether a
    session is active.
    """

    def active_sessions(self, *, exclude_key=None):
        """
        Unexpired authenticated sessions as ``{session_key: user_id}``.
        """
        qs = Session.objects.filter(expire_date__gt=timezone.now())
        if exclude_key:
            qs = qs.exclude(session_key=exclude_key)

        sessions = {}
        for session in qs.iterator():
            user_id = session.get_decoded().get(SESSION_KEY)
            if user_id is not None:
                sessions[session.session_key] = int(user_id)
        return sessions

    def open_session(self, request, user):
        """
        Called on login. Returns True when no other session was active.
        """
        was_idle = not self.active_sessions(exclude_key=_session_key(request))
        logger.info("Session opened for user %s", user.pk)
        return was_idle

    def close_session(self, request, user=None):
        """
        Called on logout, before the session is flushed.
        Returns True when no other session remains.
        """
        now_idle = not self.active_sessions(exclude_key=_session_key(request))
        logger.info("Session closed for user %s", getattr(user, "pk", None))
        return now_idle

    @property
    def is_active(self):
        return bool(self.active_sessions())

    @property
    def active_user_ids(self):
        return frozenset(self.active_sessions().values())


def _session_key(request):
    session = getattr(request, "session", None)
    return getattr(session, "session_key", None)


# ============================================================
# PROCESS CONTEXT
# Wired to Django's login/logout signals
# ============================================================
_board_context = None


def get_board_context():
    global _board_context

    if _board_context is None:
        _board_context = BoardContext()

    return _board_context
