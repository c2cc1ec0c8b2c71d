from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ..listings.models import Listing
from ..core.enums import StatusBooking
from ..core.models import TimeStampedModel
from ..core.utils import add_months

# Allowed status moves and the listing ``available`` value each one implies.
# ``None`` means: recompute from the remaining approved bookings.
BOOKING_TRANSITIONS = {
    (StatusBooking.PENDING.value, StatusBooking.APPROVED.value): False,
    (StatusBooking.PENDING.value, StatusBooking.REJECTED.value): None,
    (StatusBooking.PENDING.value, StatusBooking.CANCELLED.value): None,
    (StatusBooking.APPROVED.value, StatusBooking.COMPLETED.value): None,
}


def is_allowed_transition(current, target) -> bool:
    return (str(current), str(target)) in BOOKING_TRANSITIONS


def availability_after(current, target):
    return BOOKING_TRANSITIONS[(str(current), str(target))]


class BookingQuerySet(models.QuerySet):

    def pending(self):
        return self.filter(status=StatusBooking.PENDING)

    def approved(self):
        return self.filter(status=StatusBooking.APPROVED)

    def for_renter(self, user):
        return self.filter(renter=user)

    def for_owner(self, user):
        return self.filter(owner=user)

    def visible_to(self, user):
        """Renter sees their bookings, owner sees bookings on their listings, admin sees all."""
        from ..core.roles import is_admin
        if is_admin(user):
            return self
        return self.filter(Q(renter=user) | Q(owner=user))

    def swap_status(self, pk, expected, target, **extra) -> int:
        """
        Compare-and-swap of the status: changes the row only while it still holds ``expected``.
        :return: number of rows changed (0 or 1)
        """
        return self.filter(pk=pk, status=expected).update(status=target, updated_at=timezone.now(), **extra)


class Booking(TimeStampedModel):
    listing = models.ForeignKey(Listing, on_delete=models.PROTECT, related_name="bookings", verbose_name=_("Listing"))
    renter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
        verbose_name=_("Renter")
    )
    # copied from listing.owner at creation time
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="received_bookings",
        verbose_name=_("Owner")
    )
    status = models.CharField(
        max_length=10,
        choices=StatusBooking.choices, default=StatusBooking.PENDING,
        editable=False,
        verbose_name=_("Status")
    )

    # contact snapshot of the requester
    contact_name = models.CharField(max_length=150, verbose_name=_("Name"))
    contact_phone = models.CharField(max_length=30, verbose_name=_("Phone"))
    contact_email = models.EmailField(verbose_name=_("Email"))
    message = models.TextField(blank=True, default="", verbose_name=_("Message"))

    move_in_date = models.DateField(verbose_name=_("Move-in date"))
    lease_duration = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("Lease duration in months."),
        verbose_name=_("Lease duration")
    )
    reason = models.CharField(max_length=500, blank=True, default="", verbose_name=_("Reason"))

    objects = BookingQuerySet.as_manager()

    class Meta(TimeStampedModel.Meta):
        constraints = [
            models.UniqueConstraint(
                fields=["listing"],
                condition=Q(status=StatusBooking.APPROVED),
                name="one_approved_booking_per_listing",
            ),
            models.UniqueConstraint(
                fields=["listing", "renter"],
                condition=Q(status=StatusBooking.PENDING),
                name="one_pending_booking_per_renter",
            ),
        ]
        indexes = [models.Index(fields=["listing", "status"], name="booking_listing_status_idx")]

    @property
    def lease_end_date(self):
        return add_months(self.move_in_date, self.lease_duration)

    def lease_has_ended(self, today=None) -> bool:
        today = today or timezone.localdate()
        return self.lease_end_date <= today

    def __str__(self):
        return f"#{self.pk} {self.listing_id}: {self.move_in_date} +{self.lease_duration}m, {self.status}"
