from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from faker import Faker
from rest_framework.test import APIClient

from apps.bookings.models import Booking
from apps.core.enums import Roles, StatusBooking, TypesHousing
from apps.listings.models import Listing
from rental_api import DEFAULT_PASSWORD, RentalApi, booking_payload

fake = Faker()
User = get_user_model()


@pytest.fixture
def make_user(db):
    def _make_user(role=Roles.RENTER, is_approved=True, **kwargs):
        user = User(
            email=kwargs.pop("email", fake.unique.email()),
            username=kwargs.pop("username", fake.unique.user_name()),
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            role=role,
            is_approved=is_approved,
            **kwargs,
        )
        user.set_password(DEFAULT_PASSWORD)
        user.save()
        return user
    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user(Roles.OWNER)


@pytest.fixture
def other_owner(make_user):
    return make_user(Roles.OWNER)


@pytest.fixture
def renter(make_user):
    return make_user(Roles.RENTER)


@pytest.fixture
def other_renter(make_user):
    return make_user(Roles.RENTER)


@pytest.fixture
def admin_user(make_user):
    return make_user(Roles.ADMIN, is_staff=True, is_superuser=True)


@pytest.fixture
def make_listing(db):
    def _make_listing(owner, **kwargs):
        data = {
            "title": f"{fake.word().capitalize()} {fake.word()}",
            "type_housing": TypesHousing.APARTMENT,
            "price": Decimal(fake.random_int(300, 3000)),
            "street": fake.street_address(),
            "city": fake.city(),
            "country": "DE",
            "bedrooms": fake.random_int(1, 5),
            "description": fake.paragraph(nb_sentences=2),
        }
        data.update(kwargs)
        return Listing.objects.create(owner=owner, **data)
    return _make_listing


@pytest.fixture
def listing(make_listing, owner):
    return make_listing(owner)


@pytest.fixture
def make_booking(db):
    """
    Writes a booking row directly, bypassing the coordinator, and keeps the
    listing flag in line with it. Use it to arrange state, not to test creation.
    """
    def _make_booking(listing, renter, status=StatusBooking.PENDING, **kwargs):
        data = booking_payload(**kwargs)
        booking = Booking.objects.create(listing=listing, renter=renter, owner_id=listing.owner_id,
                                         status=status, **data)
        if status == StatusBooking.APPROVED:
            Listing.objects.filter(pk=listing.pk).update(available=False)
            listing.refresh_from_db()
        return booking
    return _make_booking


@pytest.fixture
def api():
    """Anonymous API client."""
    return RentalApi(client=APIClient())


@pytest.fixture
def api_as():
    """RentalApi authenticated as the given user."""
    def _api_as(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return RentalApi(client=client)
    return _api_as

