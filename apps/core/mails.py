import logging
from django.conf import settings
from django.core.mail import send_mass_mail

logger = logging.getLogger(__name__)


def send_safe_mass_mail(messages) -> int:
    """
    Sends one email per ``(subject, message, to_email)`` over a single connection.
    Empty addresses are skipped. Delivery problems are logged, never raised:
    notifications go out after the booking transaction has committed.
    :return: number of emails sent
    """
    from_email = getattr(settings, "DEFAULT_FROM_EMAIL", None)
    datatuple = [(subject, message, from_email, [to_email]) for subject, message, to_email in messages if to_email]
    if not datatuple:
        return 0
    try:
        sent = send_mass_mail(datatuple, fail_silently=False)
    except Exception as exc:
        logger.warning("Failed to send email. to=%s error=%s", [item[3][0] for item in datatuple], exc)
        return 0
    if sent < len(datatuple):
        logger.warning("Only %s of %s emails were sent", sent, len(datatuple))
    return sent
