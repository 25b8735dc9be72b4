"""
notifications/signals/session.py

Ties the deadline scanner to the login session lifecycle:
a login starts it, the logout of the last session stops it.
"""

from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.dispatch import receiver

from accounts.context import get_board_context
from notifications.scheduler import get_scanner


@receiver(user_logged_in)
def open_board_session(sender, request, user, **kwargs):
    get_board_context().open_session(request, user)
    get_scanner().start()


@receiver(user_logged_out)
def close_board_session(sender, request, user, **kwargs):
    if get_board_context().close_session(request, user):
        get_scanner().stop()
