import calendar
from datetime import date

from .enums import Roles


def get_user_for(obj, kind):
    """
    Returns a user of the specified type from a Listing / Booking object.
    kind:
    - "owner": Listing.owner / Booking.owner
    - "renter": Booking.renter
    """
    if obj is None:
        return None

    if kind == Roles.OWNER:
        return getattr(obj, "owner", None)

    if kind == Roles.RENTER:
        return getattr(obj, "renter", None)

    return None


def get_user_email(obj, kind):
    """ Email user (owner/renter) or None. """
    user = get_user_for(obj, kind)
    if user is not None:
        return getattr(user, "email", None)
    return None


def add_months(start: date, months: int) -> date:
    """
    Same day ``months`` later, clamped to the last day of the target month
    (31 Jan + 1 month -> 28/29 Feb).
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
