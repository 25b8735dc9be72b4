import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

SMTP_BACKEND = "django.core.mail.backends.smtp.EmailBackend"


def email_is_configured():
    if settings.EMAIL_BACKEND != SMTP_BACKEND:
        return True
    return bool(settings.EMAIL_HOST_USER)


def send_reminder_email(*, to_name, to_email, subject, body):
    """
    Send one reminder email.

    Never raises: returns True on success, False on a transport error.
    Without SMTP credentials the send is simulated and logged.
    """
    if not email_is_configured():
        logger.warning(
            "Email is not configured; simulating send to %s <%s>: %s",
            to_name, to_email, subject,
        )
        return True

    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[to_email],
            fail_silently=False,
        )
    except Exception:
        logger.exception("Failed to send reminder email to %s", to_email)
        return False

    logger.info("Reminder email sent to %s", to_email)
    return True
