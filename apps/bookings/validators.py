from django.conf import settings
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from typing import Any


def validate_move_in_date(move_in_date: Any):
    today = timezone.localdate()
    if move_in_date is None:
        raise ValidationError({"move_in_date": "Move-in date is required."})
    if move_in_date < today:
        raise ValidationError(
            {"move_in_date": f"The move-in date ({move_in_date.isoformat()}) must not be in the past."})

def validate_lease_duration(lease_duration: Any):
    lease_max = int(getattr(settings, "RENTAL_LEASE_DURATION_MAX", 60) or 60)
    if lease_duration is None or lease_duration < 1:
        raise ValidationError({"lease_duration": "Lease duration must be >= 1 month."})
    if lease_duration > lease_max:
        raise ValidationError({"lease_duration": f"Lease duration cannot exceed {lease_max} months."})

def validate_owner_not_self(renter: Any, listing: Any):
    # The owner cannot book their own listing
    if getattr(renter, "id", None) and listing.owner_id == renter.id:
        raise ValidationError({"listing": "Owner cannot book their own listing."})

def validate_contact(data: dict):
    missing = [field for field in ("contact_name", "contact_phone", "contact_email") if not data.get(field)]
    if missing:
        raise ValidationError({field: "This field is required." for field in missing})

def check_booking_request(renter: Any, listing: Any, data: dict):
    """All input checks that do not depend on the booking state of the listing."""
    validate_owner_not_self(renter, listing)
    validate_contact(data)
    validate_move_in_date(data.get("move_in_date"))
    validate_lease_duration(data.get("lease_duration"))
