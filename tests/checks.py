from apps.bookings.models import Booking


def assert_invariant(listing):
    """available == False exactly when one approved booking exists, never more than one."""
    listing.refresh_from_db()
    approved = Booking.objects.approved().filter(listing=listing).count()
    assert approved <= 1
    assert listing.available == (approved == 0)
