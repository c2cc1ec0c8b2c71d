from django.db import models
from django.utils.translation import gettext_lazy as _

class Roles(models.TextChoices):
    RENTER = "renter", _("Renter")
    OWNER  = "owner",  _("Owner")
    ADMIN  = "admin",  _("Admin")

class TypesHousing(models.TextChoices):
    APARTMENT = "apartment", _("Apartment")
    HOUSE     = "house",     _("House")
    ROOM      = "room",      _("Room")
    STUDIO    = "studio",    _("Studio")
    VILLA     = "villa",     _("Villa")

class TypesAd(models.TextChoices):
    RENT = "rent", _("Rent")
    SALE = "sale", _("Sale")


class StatusBooking(models.TextChoices):
    PENDING   = "pending",   _("Pending")    # created, waiting for the owner's decision
    APPROVED  = "approved",  _("Approved")   # accepted by the owner, listing is taken
    REJECTED  = "rejected",  _("Rejected")   # declined by the owner (or auto-rejected)
    CANCELLED = "cancelled", _("Cancelled")  # withdrawn by the renter while pending
    COMPLETED = "completed", _("Completed")  # lease has ended
