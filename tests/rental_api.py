from datetime import timedelta

import requests
from django.utils import timezone
from faker import Faker

from apps.core.enums import TypesHousing, TypesAd

fake = Faker()

API_PREFIX = "/api/v1"
DEFAULT_PASSWORD = "SecurePassword1!"


class RentalApi:
    """
    Thin wrapper around the REST API.

    Works over a DRF ``APIClient`` (in-process tests) or a ``requests.Session``
    against a running server (``base_url``). Every call returns the raw response,
    so tests can check 200/403/404/409 themselves.
    """
    def __init__(self, base_url: str = "", client=None):
        self.base_url = base_url.rstrip("/") + API_PREFIX
        self.sess = client if client is not None else requests.Session()
        self.is_live = isinstance(self.sess, requests.Session)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path, params=None):
        if self.is_live:
            return self.sess.get(self._url(path), params=params or {})
        return self.sess.get(self._url(path), data=params or {})

    def post(self, path, payload=None):
        if self.is_live:
            return self.sess.post(self._url(path), json=payload or {}, allow_redirects=False)
        return self.sess.post(self._url(path), payload or {}, format="json")

    def patch(self, path, payload):
        if self.is_live:
            return self.sess.patch(self._url(path), json=payload)
        return self.sess.patch(self._url(path), payload, format="json")

    def put(self, path, payload):
        if self.is_live:
            return self.sess.put(self._url(path), json=payload)
        return self.sess.put(self._url(path), payload, format="json")

    def delete(self, path):
        return self.sess.delete(self._url(path))

    # AUTH
    def register(self, role: str, password: str, **kwargs):
        payload = {
            "email": kwargs.get("email", fake.unique.email()),
            "username": kwargs.get("username", fake.unique.user_name()),
            "first_name": fake.first_name(),
            "last_name": fake.last_name(),
            "password": password,
            "password2": password,
            "role": role,
        }
        return self.post("user/register/", payload)

    def login(self, email: str, password: str):
        """access_token/refresh_token end up in the client's cookies"""
        return self.post("user/login/", {"email": email, "password": password})

    def logout(self):
        return self.post("user/logout/")

    def me(self):
        return self.get("user/me/")

    # LISTINGS
    def listing_payload(self, **kwargs):
        payload = {
            "title": f"{fake.word().capitalize()} {fake.word()}",
            "type_housing": TypesHousing.APARTMENT.value,
            "type_ad": TypesAd.RENT.value,
            "price": str(fake.random_int(300, 5_000)),
            "street": fake.street_address(),
            "city": fake.city(),
            "country": "DE",
            "bedrooms": fake.random_int(1, 5),
            "bathrooms": 1,
            "description": fake.paragraph(nb_sentences=3),
            "amenities": ["wifi"],
        }
        payload.update(kwargs)
        return payload

    def create_listing(self, **kwargs):
        return self.post("listings/", self.listing_payload(**kwargs))

    def list_listings(self, **params):
        return self.get("listings/", params)

    def my_listings(self):
        return self.get("listings/mine/")

    def get_listing(self, listing_id):
        return self.get(f"listings/{listing_id}/")

    def update_listing_patch(self, listing_id, payload: dict):
        return self.patch(f"listings/{listing_id}/", payload)

    def delete_listing(self, listing_id):
        return self.delete(f"listings/{listing_id}/")

    # BOOKINGS
    def create_booking(self, payload: dict):
        """payload: listing, contact_*, move_in_date, lease_duration"""
        payload = {key: value.isoformat() if hasattr(value, "isoformat") else value
                   for key, value in payload.items()}
        return self.post("bookings/", payload)

    def list_bookings(self, **params):
        return self.get("bookings/", params)

    def renter_bookings(self):
        return self.get("bookings/renter/")

    def owner_bookings(self):
        return self.get("bookings/owner/")

    def get_booking(self, booking_id):
        return self.get(f"bookings/{booking_id}/")

    def set_status(self, booking_id, status: str, expected_status: str = None, reason: str = ""):
        payload = {"status": status, "reason": reason}
        if expected_status:
            payload["expected_status"] = expected_status
        return self.post(f"bookings/{booking_id}/status/", payload)

    def approve_booking(self, booking_id, expected_status: str = None):
        return self.set_status(booking_id, "approved", expected_status)

    def reject_booking(self, booking_id, reason: str = ""):
        return self.set_status(booking_id, "rejected", reason=reason)

    def complete_booking(self, booking_id):
        return self.set_status(booking_id, "completed")

    def cancel_booking(self, booking_id, reason: str = ""):
        return self.post(f"bookings/{booking_id}/cancel/", {"reason": reason})

    # ADMIN
    def list_users(self, **params):
        return self.get("admin/users/", params)

    def approve_owner(self, user_id):
        return self.post(f"admin/users/{user_id}/approve-owner/")

    def delete_user(self, user_id):
        return self.delete(f"admin/users/{user_id}/")


def results(resp):
    """Items of a (possibly paginated) list response."""
    data = resp.json()
    return data["results"] if isinstance(data, dict) and "results" in data else data


def booking_payload(listing_id=None, **kwargs):
    """Request body for POST /bookings/ (and the coordinator's ``data``)."""
    payload = {
        "contact_name": fake.name(),
        "contact_phone": fake.numerify("+49 ### #######"),
        "contact_email": fake.email(),
        "message": fake.sentence(),
        "move_in_date": timezone.localdate() + timedelta(days=14),
        "lease_duration": 6,
    }
    if listing_id is not None:
        payload["listing"] = listing_id
    payload.update(kwargs)
    return payload
