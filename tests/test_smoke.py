"""
End-to-end run against a live server with seeded users (`manage.py seed_users`):

    RENTAL_BASE_URL=http://localhost:8000 pytest -m integration
"""
import os

import pytest

from rental_api import DEFAULT_PASSWORD, RentalApi, booking_payload

BASE_URL = os.environ.get("RENTAL_BASE_URL", "")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not BASE_URL, reason="RENTAL_BASE_URL is not set"),
]


def _login(email):
    api = RentalApi(BASE_URL)
    resp = api.login(email, DEFAULT_PASSWORD)
    assert resp.status_code == 200, resp.text
    return api


def test_booking_lifecycle():
    owner = _login("owner1@example.com")
    renter1 = _login("renter1@example.com")
    renter2 = _login("renter2@example.com")

    resp = owner.create_listing()
    assert resp.status_code == 201, resp.text
    listing_id = resp.json()["id"]
    try:
        resp = renter1.create_booking(booking_payload(listing_id))
        assert resp.status_code == 201, resp.text
        booking_id = resp.json()["id"]

        resp = owner.approve_booking(booking_id, expected_status="pending")
        assert resp.status_code == 200, resp.text
        assert resp.json()["listing_state"]["available"] is False

        resp = renter2.create_booking(booking_payload(listing_id))
        assert resp.status_code == 409, resp.text
        assert resp.json()["code"] == "not_available"

        resp = owner.reject_booking(booking_id)
        assert resp.status_code == 409, resp.text
    finally:
        assert owner.delete_listing(listing_id).status_code == 204

    assert renter1.get_booking(booking_id).status_code == 404
