from decimal import Decimal

import pytest

from apps.bookings.models import Booking
from apps.core.enums import Roles, StatusBooking
from apps.listings.models import Listing
from rental_api import results

pytestmark = pytest.mark.django_db


def test_create_listing_as_approved_owner(api_as, owner):
    resp = api_as(owner).create_listing(title="Sunny loft")

    assert resp.status_code == 201, resp.content
    data = resp.json()
    assert data["owner_id"] == owner.pk
    assert data["available"] is True
    assert Listing.objects.get(pk=data["id"]).owner == owner


def test_create_listing_forbidden(api, api_as, make_user, renter):
    unapproved_owner = make_user(Roles.OWNER, is_approved=False)

    assert api.create_listing().status_code == 401
    assert api_as(renter).create_listing().status_code == 403
    assert api_as(unapproved_owner).create_listing().status_code == 403
    assert not Listing.objects.exists()


def test_create_listing_rejects_available(api_as, owner):
    resp = api_as(owner).create_listing(available=False)

    assert resp.status_code == 400, resp.content
    assert "available" in resp.json()


def test_create_listing_same_address_twice(api_as, owner):
    api = api_as(owner)
    assert api.create_listing(city="Berlin", street="Main st. 1").status_code == 201

    resp = api.create_listing(city="berlin", street="main st. 1")
    assert resp.status_code == 400, resp.content


def test_patch_listing(api_as, listing, owner):
    resp = api_as(owner).update_listing_patch(listing.pk, {"price": "1234.50", "furnished": True})

    assert resp.status_code == 200, resp.content
    listing.refresh_from_db()
    assert listing.price == Decimal("1234.50")
    assert listing.furnished is True


def test_patch_available_is_refused(api_as, listing, owner):
    resp = api_as(owner).update_listing_patch(listing.pk, {"available": False})

    assert resp.status_code == 400, resp.content
    listing.refresh_from_db()
    assert listing.available is True


def test_patch_by_other_owner(api_as, listing, other_owner):
    resp = api_as(other_owner).update_listing_patch(listing.pk, {"title": "Mine now"})
    assert resp.status_code == 403, resp.content


def test_list_shows_only_available_by_default(api, make_listing, owner, renter, make_booking):
    free = make_listing(owner)
    taken = make_listing(owner)
    make_booking(taken, renter, StatusBooking.APPROVED)

    assert [item["id"] for item in results(api.list_listings())] == [free.pk]
    assert [item["id"] for item in results(api.list_listings(available="false"))] == [taken.pk]
    assert api.get_listing(taken.pk).status_code == 200


def test_list_filters(api, make_listing, owner):
    cheap = make_listing(owner, city="Hamburg", price=Decimal("500"), bedrooms=1)
    make_listing(owner, city="Hamburg", price=Decimal("2500"), bedrooms=3)
    make_listing(owner, city="Munich", price=Decimal("400"), bedrooms=2)

    found = results(api.list_listings(city="hamb", max_price="1000"))
    assert [item["id"] for item in found] == [cheap.pk]
    assert len(results(api.list_listings(bedrooms=2))) == 2
    assert len(results(api.list_listings(search="munich"))) == 1


def test_mine(api_as, make_listing, owner, other_owner, renter, make_booking):
    own = make_listing(owner)
    make_booking(own, renter, StatusBooking.APPROVED)
    make_listing(other_owner)

    resp = api_as(owner).my_listings()
    assert resp.status_code == 200, resp.content
    assert [item["id"] for item in results(resp)] == [own.pk]
    assert api_as(renter).my_listings().status_code == 403


def test_delete_listing_cascades(api_as, listing, owner, renter, other_renter, make_booking):
    make_booking(listing, renter, StatusBooking.APPROVED)
    make_booking(listing, other_renter, StatusBooking.REJECTED)

    resp = api_as(owner).delete_listing(listing.pk)

    assert resp.status_code == 204, resp.content
    assert not Listing.objects.filter(pk=listing.pk).exists()
    assert not Booking.objects.filter(listing_id=listing.pk).exists()


def test_delete_listing_by_renter(api_as, listing, renter, make_booking):
    make_booking(listing, renter)

    assert api_as(renter).delete_listing(listing.pk).status_code == 403
    assert Booking.objects.filter(listing=listing).count() == 1


def test_delete_listing_by_admin(api_as, listing, admin_user):
    assert api_as(admin_user).delete_listing(listing.pk).status_code == 204
