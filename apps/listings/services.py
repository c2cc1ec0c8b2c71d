"""Listing store: the only ways client-facing code reads and writes listings."""
import logging

from django.db import transaction
from rest_framework.exceptions import ValidationError

from ..core.exceptions import NotFound
from ..core.permissions import ensure_can_create_listing, ensure_can_mutate_listing
from .models import Listing

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS = frozenset({"available", "owner"})


def get_listing(pk) -> Listing:
    listing = Listing.objects.select_related("owner").filter(pk=pk).first()
    if listing is None:
        raise NotFound("Listing not found.")
    return listing


def reject_read_only(data: dict):
    """
    ``available`` is derived from bookings; a client patch that carries it is refused
    instead of being silently dropped.
    """
    offending = sorted(READ_ONLY_FIELDS & set(data or ()))
    if offending:
        raise ValidationError({field: "This field is read-only." for field in offending})


@transaction.atomic
def create_listing(owner, data: dict) -> Listing:
    ensure_can_create_listing(owner)
    reject_read_only(data)
    listing = Listing.objects.create(owner=owner, **data)
    logger.info("listing %s created by user %s", listing.pk, owner.pk)
    return listing


@transaction.atomic
def update_listing(listing: Listing, user, data: dict) -> Listing:
    ensure_can_mutate_listing(user, listing)
    reject_read_only(data)
    for field, value in data.items():
        setattr(listing, field, value)
    listing.save(update_fields=[*data.keys(), "updated_at"])
    logger.info("listing %s updated by user %s: %s", listing.pk, user.pk, ", ".join(sorted(data)))
    return listing
