from django.dispatch import Signal, receiver

from ..core.enums import Roles
from ..core.mails import send_safe_mass_mail
from ..core.utils import get_user_email

# Sent by the coordinator after the transaction has committed.
# kwargs: booking, old_status (None on creation), new_status
booking_status_changed = Signal()


@receiver(booking_status_changed)
def send_email_to(sender, booking, old_status, new_status, **kwargs):
    """Sends an email to the listing owner and the booking renter."""
    to_renter_email = get_user_email(booking, Roles.RENTER)
    to_owner_email = get_user_email(booking, Roles.OWNER)
    title = booking.listing.title
    if old_status is None:
        subject_to_renter = f"Your booking request for '{title}' has been sent."
        subject_to_owner = f"New booking request for '{title}' from '{to_renter_email}'."
    else:
        subject_to_renter = subject_to_owner = \
            f"The booking status changed from '{old_status}' to '{new_status}'"
    message = (f"Booking {title} (ID: {booking.id}): move-in {booking.move_in_date.isoformat()}, "
               f"{booking.lease_duration} month(s), status: {new_status}.")
    if booking.reason:
        message += f"\nReason: {booking.reason}"
    send_safe_mass_mail([
        (subject_to_renter, message, to_renter_email),
        (subject_to_owner, message, to_owner_email),
    ])
