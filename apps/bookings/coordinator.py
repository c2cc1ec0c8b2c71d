"""
Booking lifecycle coordinator.

The only place that writes ``Booking.status`` and ``Listing.available``.
It keeps the invariant: a listing is unavailable exactly when one of its
bookings is approved, and no listing has more than one approved booking.

Every public function is a single database transaction:

1. lock the listing row (``select_for_update``), so work is serialized per listing;
2. read the booking, check authorization and the state machine;
3. compare-and-swap the booking status, then update the listing flag;
4. commit both, or raise and write nothing.

``IntegrityError`` (a partial unique constraint lost a race) becomes ``Conflict``,
any other ``DatabaseError`` becomes ``StorageFailure``. Notifications are sent
only after commit.
"""
import logging
from functools import partial

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from ..core.enums import StatusBooking
from ..core.exceptions import (NotFound, NotAvailable, DuplicatePending, InvalidTransition, StatusChanged,
                               StorageFailure)
from ..core.permissions import ensure_can_administer, ensure_can_create_booking, ensure_can_transition
from ..listings.models import Listing
from .models import Booking, availability_after, is_allowed_transition
from .signals import booking_status_changed
from .validators import check_booking_request

logger = logging.getLogger(__name__)

BOOKING_REQUEST_FIELDS = ("contact_name", "contact_phone", "contact_email", "message",
                          "move_in_date", "lease_duration")


def lock_listing(listing_id) -> Listing:
    listing = Listing.objects.select_for_update().filter(pk=listing_id).first()
    if listing is None:
        raise NotFound("Listing not found.")
    return listing


def _lock_booking(booking_id):
    """
    Locks the listing first, then reads the booking, so that every writer of one
    listing takes the same lock in the same order.
    """
    listing_id = Booking.objects.filter(pk=booking_id).values_list("listing_id", flat=True).first()
    if listing_id is None:
        raise NotFound("Booking not found.")
    listing = lock_listing(listing_id)
    booking = Booking.objects.select_related("renter", "owner").filter(pk=booking_id).first()
    if booking is None:
        raise NotFound("Booking not found.")
    booking.listing = listing
    return booking, listing


def _notify(bookings, old_status):
    for booking in bookings:
        booking_status_changed.send(sender=Booking, booking=booking, old_status=old_status,
                                    new_status=booking.status)


def _notify_on_commit(bookings, old_status):
    transaction.on_commit(partial(_notify, list(bookings), old_status))


def sync_listing_availability(listing_id) -> bool:
    """
    Sets ``available`` from the ledger: true unless an approved booking exists.
    Must run inside the caller's transaction.
    :return: the value written
    """
    available = not Booking.objects.approved().filter(listing_id=listing_id).exists()
    Listing.objects.set_available(listing_id, available)
    return available


def _reject_siblings(booking):
    """Approving one booking rejects the other pending requests on the same listing."""
    if not getattr(settings, "RENTAL_AUTO_REJECT_SIBLINGS", True):
        return []
    siblings = Booking.objects.pending().filter(listing_id=booking.listing_id).exclude(pk=booking.pk)
    sibling_ids = list(siblings.values_list("pk", flat=True))
    if not sibling_ids:
        return []
    Booking.objects.pending().filter(pk__in=sibling_ids).update(
        status=StatusBooking.REJECTED,
        reason=f"Auto-rejected: listing booked by booking #{booking.pk}",
        updated_at=timezone.now(),
    )
    logger.info("booking %s approved: auto-rejected siblings %s", booking.pk, sibling_ids)
    return list(Booking.objects.select_related("listing", "renter", "owner").filter(pk__in=sibling_ids))


def request_booking(renter, listing_id, data: dict) -> Booking:
    """
    Creates a ``pending`` booking on an available listing.
    :raises NotFound: no such listing
    :raises NotAvailable: the listing has an approved booking
    :raises DuplicatePending: the renter already waits for an answer on this listing
    """
    ensure_can_create_booking(renter)
    fields = {key: data[key] for key in BOOKING_REQUEST_FIELDS if key in data}
    try:
        with transaction.atomic():
            listing = lock_listing(listing_id)
            check_booking_request(renter, listing, fields)
            if not listing.available:
                raise NotAvailable()
            if Booking.objects.pending().filter(listing=listing, renter=renter).exists():
                raise DuplicatePending()
            booking = Booking.objects.create(
                listing=listing,
                renter=renter,
                owner_id=listing.owner_id,
                status=StatusBooking.PENDING,
                **fields,
            )
            _notify_on_commit([booking], None)
    except IntegrityError as exc:
        logger.info("booking request by user %s on listing %s lost a race: %s", renter.pk, listing_id, exc)
        raise DuplicatePending() from exc
    except DatabaseError as exc:
        logger.exception("storage failure while requesting a booking on listing %s", listing_id)
        raise StorageFailure() from exc

    logger.info("booking %s requested on listing %s by user %s", booking.pk, listing_id, renter.pk)
    return booking


def _transition(booking_id, target_status, *, authorize=None, expected_status=None, reason="", today=None):
    if target_status not in StatusBooking.values:
        raise ValidationError({"status": f"Unknown status '{target_status}'."})
    target = StatusBooking(target_status)
    try:
        with transaction.atomic():
            booking, listing = _lock_booking(booking_id)
            if authorize is not None:
                authorize(booking)

            current = booking.status
            if expected_status is not None and expected_status != current:
                raise StatusChanged(f"Booking is '{current}', expected '{expected_status}'.")
            if not is_allowed_transition(current, target):
                raise InvalidTransition(f"Cannot move booking from '{current}' to '{target}'.")
            if target == StatusBooking.COMPLETED and not booking.lease_has_ended(today):
                raise InvalidTransition(
                    f"Lease ends on {booking.lease_end_date.isoformat()}, the booking cannot be completed yet.")

            extra = {"reason": reason} if reason else {}
            if not Booking.objects.swap_status(booking.pk, current, target, **extra):
                raise StatusChanged()

            rejected = []
            if availability_after(current, target) is False:
                if not Listing.objects.claim(listing.pk):
                    raise NotAvailable("Listing already has an approved booking.")
                rejected = _reject_siblings(booking)
            else:
                sync_listing_availability(listing.pk)

            booking.refresh_from_db()
            listing.refresh_from_db()
            booking.listing = listing
            _notify_on_commit([booking], current)
            if rejected:
                _notify_on_commit(rejected, StatusBooking.PENDING)
    except IntegrityError as exc:
        logger.info("booking %s -> %s lost a race: %s", booking_id, target, exc)
        raise NotAvailable("Listing already has an approved booking.") from exc
    except DatabaseError as exc:
        logger.exception("storage failure while moving booking %s to %s", booking_id, target)
        raise StorageFailure() from exc

    logger.info("booking %s: %s -> %s (listing %s available=%s)",
                booking.pk, current, target, listing.pk, listing.available)
    return booking


def transition_booking(booking_id, target_status, user, expected_status=None, reason="") -> Booking:
    """
    Moves a booking through the state machine on behalf of ``user``.

    ``expected_status`` is the status the caller has seen; if the booking has moved on
    since, ``StatusChanged`` is raised instead of applying the transition.
    The returned booking carries the updated listing in ``booking.listing``.
    """
    return _transition(
        booking_id,
        target_status,
        authorize=lambda booking: ensure_can_transition(user, booking, target_status),
        expected_status=expected_status,
        reason=reason,
    )


def cancel_booking(booking_id, user, reason="", expected_status=None) -> Booking:
    """Renter withdraws a pending request."""
    return transition_booking(booking_id, StatusBooking.CANCELLED, user,
                              expected_status=expected_status, reason=reason)


def moderate_booking(booking_id, target_status, admin, reason="") -> Booking:
    """
    Admin override used by the Django admin: skips the participant check,
    but not the state machine or the availability bookkeeping.
    """
    ensure_can_administer(admin)
    return _transition(booking_id, target_status, reason=reason)


def complete_expired_bookings(today=None) -> list:
    """
    Lease-end trigger: completes every approved booking whose lease is over.
    Each booking is its own transaction; a conflict on one does not stop the others.
    :return: ids of completed bookings
    """
    today = today or timezone.localdate()
    completed = []
    for booking in Booking.objects.approved().filter(move_in_date__lte=today).only("id", "move_in_date",
                                                                                    "lease_duration"):
        if not booking.lease_has_ended(today):
            continue
        try:
            _transition(booking.pk, StatusBooking.COMPLETED, expected_status=StatusBooking.APPROVED,
                        reason="Lease ended", today=today)
        except (StatusChanged, InvalidTransition, NotFound) as exc:
            logger.info("booking %s was not completed: %s", booking.pk, exc)
            continue
        completed.append(booking.pk)
    return completed
