from rest_framework.permissions import BasePermission, SAFE_METHODS

from .enums import StatusBooking
from .exceptions import Forbidden, NotFound
from .roles import is_admin, is_owner, is_renter, is_approved_owner

# Who may request which target status of a booking.
OWNER_TARGETS = frozenset({StatusBooking.APPROVED.value, StatusBooking.REJECTED.value, StatusBooking.COMPLETED.value})
RENTER_TARGETS = frozenset({StatusBooking.CANCELLED.value})


def can_create_listing(user) -> bool:
    return is_approved_owner(user) or is_admin(user)


def can_mutate_listing(user, listing) -> bool:
    return is_admin(user) or (is_owner(user) and listing.owner_id == user.id)


def can_create_booking(user, listing=None) -> bool:
    """Renters only, never on a listing they own."""
    if not is_renter(user):
        return False
    return listing is None or listing.owner_id != user.id


def can_view_booking(user, booking) -> bool:
    return is_admin(user) or user.id in (booking.renter_id, booking.owner_id)


def can_transition(user, booking, target_status) -> bool:
    """
    Owner decides (approve/reject/complete), renter withdraws (cancel).
    Does not look at the current status: that is the state machine's job.
    """
    target_status = str(target_status)
    if target_status in OWNER_TARGETS:
        return is_owner(user) and booking.owner_id == user.id
    if target_status in RENTER_TARGETS:
        return is_renter(user) and booking.renter_id == user.id
    return False


def can_administer(user) -> bool:
    return is_admin(user)


def ensure_can_create_listing(user):
    if not can_create_listing(user):
        raise Forbidden("Only approved owners can publish listings.")


def ensure_can_mutate_listing(user, listing):
    if not can_mutate_listing(user, listing):
        raise Forbidden("Only the listing owner or an admin can change this listing.")


def ensure_can_create_booking(user, listing=None):
    if not can_create_booking(user, listing):
        raise Forbidden("Only renters can request bookings, and not on their own listings.")


def ensure_can_transition(user, booking, target_status):
    """
    Outsiders get NotFound so the booking's existence is not leaked,
    participants in the wrong role get Forbidden.
    """
    if not can_view_booking(user, booking):
        raise NotFound("Booking not found.")
    if not can_transition(user, booking, target_status):
        raise Forbidden(f"You cannot move this booking to '{target_status}'.")


def ensure_can_administer(user):
    if not can_administer(user):
        raise Forbidden("Admin only.")


class ListingCreatePermission(BasePermission):
    message = "Only approved owners can publish listings."

    def has_permission(self, request, view):
        return can_create_listing(request.user)


class ListingChangeDeletePermission(BasePermission):
    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return can_mutate_listing(request.user, obj)


class BookingCreatePermission(BasePermission):
    message = "Only renters can request bookings."

    def has_permission(self, request, view):
        return can_create_booking(request.user)


class IsOwnerPermission(BasePermission):
    def has_permission(self, request, view):
        return is_owner(request.user)


class IsRenterPermission(BasePermission):
    def has_permission(self, request, view):
        return is_renter(request.user)


class AdminOnlyPermission(BasePermission):
    def has_permission(self, request, view):
        return can_administer(request.user)
