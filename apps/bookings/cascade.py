"""
Cascading deletes of listings and users.

Bookings, listings and users reference each other with ``PROTECT`` foreign keys,
so the database refuses to drop a parent that still has dependents. The functions
here remove dependents first and the parent last, inside one transaction: a
failure at any step leaves everything in place.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from ..core.exceptions import Conflict, NotFound, StorageFailure
from ..core.permissions import ensure_can_administer, ensure_can_mutate_listing
from ..listings.models import Listing
from .coordinator import lock_listing, sync_listing_availability
from .models import Booking

logger = logging.getLogger(__name__)


def delete_listing(listing_id, user) -> int:
    """
    Deletes a listing together with all its bookings (owner of the listing or admin).
    :return: number of bookings deleted
    """
    try:
        with transaction.atomic():
            listing = lock_listing(listing_id)
            ensure_can_mutate_listing(user, listing)
            bookings_deleted, _ = Booking.objects.filter(listing=listing).delete()
            listing.delete()
    except IntegrityError as exc:
        # a booking was created between our delete and the listing delete
        logger.info("listing %s could not be deleted: %s", listing_id, exc)
        raise Conflict("Listing still has bookings, try again.") from exc
    except DatabaseError as exc:
        logger.exception("storage failure while deleting listing %s", listing_id)
        raise StorageFailure() from exc

    logger.info("listing %s deleted by user %s with %s booking(s)", listing_id, user.pk, bookings_deleted)
    return bookings_deleted


def delete_user(user_id, admin) -> dict:
    """
    Admin only. Deletes a user, their listings and every booking where they are
    renter or owner. Other owners' listings that lose their approved booking
    become available again.
    :return: counts of deleted rows
    """
    ensure_can_administer(admin)
    if str(user_id) == str(admin.pk):
        raise ValidationError({"user": "You cannot delete your own account."})

    User = get_user_model()
    try:
        with transaction.atomic():
            user = User.objects.select_for_update().filter(pk=user_id).first()
            if user is None:
                raise NotFound("User not found.")

            owned_ids = list(Listing.objects.owned_by(user).order_by("pk").values_list("pk", flat=True))
            bookings = Booking.objects.filter(Q(renter=user) | Q(owner=user) | Q(listing_id__in=owned_ids))
            touched_ids = sorted(set(owned_ids) | set(bookings.values_list("listing_id", flat=True)))
            # every listing we delete from is locked before the bookings are read again
            list(Listing.objects.select_for_update().filter(pk__in=touched_ids).order_by("pk"))

            # bookings made after the lock on other listings make user.delete() fail with a Conflict
            bookings = bookings.filter(listing_id__in=touched_ids)
            other_ids = sorted(set(touched_ids) - set(owned_ids))
            freed_ids = sorted(set(
                bookings.approved().filter(listing_id__in=other_ids).values_list("listing_id", flat=True)))

            bookings_deleted, _ = bookings.delete()
            listings_deleted, _ = Listing.objects.filter(pk__in=owned_ids).delete()
            for listing_id in other_ids:
                sync_listing_availability(listing_id)
            user.delete()
    except IntegrityError as exc:
        logger.info("user %s could not be deleted: %s", user_id, exc)
        raise Conflict("User still has dependent records, try again.") from exc
    except DatabaseError as exc:
        logger.exception("storage failure while deleting user %s", user_id)
        raise StorageFailure() from exc

    logger.info("user %s deleted by admin %s: %s listing(s), %s booking(s), freed listings %s",
                user_id, admin.pk, listings_deleted, bookings_deleted, freed_ids)
    return {"listings": listings_deleted, "bookings": bookings_deleted, "freed_listings": freed_ids}
