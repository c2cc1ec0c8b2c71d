from datetime import timedelta

import pytest
from django.core.management import call_command
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone

from apps.bookings.models import Booking
from apps.core.enums import StatusBooking
from apps.listings.models import Listing
from checks import assert_invariant

pytestmark = pytest.mark.django_db

User = get_user_model()


def test_booking_actions_go_through_coordinator(admin_client, listing, renter, other_renter, make_booking):
    first = make_booking(listing, renter)
    second = make_booking(listing, other_renter)
    url = reverse("admin:bookings_booking_changelist")

    resp = admin_client.post(url, {"action": "approve_bookings", "_selected_action": [first.pk]})
    assert resp.status_code == 302

    assert Booking.objects.get(pk=first.pk).status == StatusBooking.APPROVED
    assert Booking.objects.get(pk=second.pk).status == StatusBooking.REJECTED
    assert_invariant(listing)

    # approved -> rejected is refused, the booking stays approved
    admin_client.post(url, {"action": "reject_bookings", "_selected_action": [first.pk]})
    assert Booking.objects.get(pk=first.pk).status == StatusBooking.APPROVED
    assert_invariant(listing)


def test_admin_delete_listing_cascades(admin_client, listing, renter, make_booking):
    make_booking(listing, renter, StatusBooking.APPROVED)

    resp = admin_client.post(reverse("admin:listings_listing_delete", args=[listing.pk]), {"post": "yes"})

    assert resp.status_code == 302
    assert not Listing.objects.filter(pk=listing.pk).exists()
    assert not Booking.objects.exists()


def test_complete_expired_bookings_command(listing, renter, make_booking):
    booking = make_booking(listing, renter, StatusBooking.APPROVED,
                           move_in_date=timezone.localdate() - timedelta(days=40), lease_duration=1)

    call_command("complete_expired_bookings")

    assert Booking.objects.get(pk=booking.pk).status == StatusBooking.COMPLETED
    assert_invariant(listing)
    assert listing.available is True


def test_complete_expired_bookings_command_with_date(listing, renter, make_booking):
    booking = make_booking(listing, renter, StatusBooking.APPROVED,
                           move_in_date=timezone.localdate() + timedelta(days=5), lease_duration=1)
    call_command("complete_expired_bookings")
    assert Booking.objects.get(pk=booking.pk).status == StatusBooking.APPROVED

    later = timezone.localdate() + timedelta(days=60)
    call_command("complete_expired_bookings", today=later.isoformat())
    assert Booking.objects.get(pk=booking.pk).status == StatusBooking.COMPLETED


def test_admin_cannot_delete_own_account(admin_client, admin_user):
    resp = admin_client.post(reverse("admin:users_user_delete", args=[admin_user.pk]), {"post": "yes"})

    assert resp.status_code == 302
    assert User.objects.filter(pk=admin_user.pk).exists()

    url = reverse("admin:users_user_changelist")
    resp = admin_client.post(url, {"action": "delete_selected", "_selected_action": [admin_user.pk], "post": "yes"})
    assert resp.status_code == 302
    assert User.objects.filter(pk=admin_user.pk).exists()
