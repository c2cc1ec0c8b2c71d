from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils.translation import gettext_lazy as _

from ..core.enums import TypesHousing, TypesAd
from ..core.models import TimeStampedModel


class ListingQuerySet(models.QuerySet):
    """
    Availability writes live here and are called only by the booking coordinator,
    inside its transaction. Both return the number of rows changed.
    """

    def available(self):
        return self.filter(available=True)

    def owned_by(self, user):
        return self.filter(owner=user)

    def claim(self, pk) -> int:
        """Compare-and-swap ``available`` true -> false."""
        return self.filter(pk=pk, available=True).update(available=False)

    def set_available(self, pk, value: bool) -> int:
        return self.filter(pk=pk).update(available=value)


class Listing(TimeStampedModel):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="listings", verbose_name=_("Owner")
    )
    title = models.CharField(max_length=120, verbose_name=_("Title"))
    type_housing = models.CharField(
        max_length=20,
        choices=TypesHousing.choices,
        default=TypesHousing.APARTMENT,
        verbose_name=_("Type"))
    type_ad = models.CharField(max_length=10, choices=TypesAd.choices, default=TypesAd.RENT,
                               verbose_name=_("Ad type"))
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)],
                                verbose_name=_("Price"))

    # address
    street = models.CharField(max_length=255, blank=True, default="", verbose_name=_("Street"))
    city = models.CharField(max_length=100, verbose_name=_("City"))
    state = models.CharField(max_length=100, blank=True, default="", verbose_name=_("State"))
    zip_code = models.CharField(max_length=20, blank=True, default="", verbose_name=_("Zip code"))
    country = models.CharField(max_length=100, blank=True, default="", verbose_name=_("Country"))

    # owner contact shown on the listing
    contact_phone = models.CharField(max_length=30, blank=True, default="", verbose_name=_("Contact phone"))
    contact_email = models.EmailField(blank=True, default="", verbose_name=_("Contact email"))

    # additional info
    bedrooms = models.PositiveSmallIntegerField(default=0, verbose_name=_("Bedrooms"))
    bathrooms = models.PositiveSmallIntegerField(default=0, verbose_name=_("Bathrooms"))
    area = models.PositiveIntegerField(null=True, blank=True, verbose_name=_("Area, m²"))
    parking = models.BooleanField(default=False, verbose_name=_("Parking"))
    furnished = models.BooleanField(default=False, verbose_name=_("Furnished"))
    pets_allowed = models.BooleanField(default=False, verbose_name=_("Pets allowed"))
    description = models.TextField(blank=True, default="", verbose_name=_("Description"))
    amenities = models.JSONField(default=list, blank=True, verbose_name=_("Amenities"))

    # derived from the bookings, see apps.bookings.coordinator
    available = models.BooleanField(default=True, editable=False, verbose_name=_("Available"))

    objects = ListingQuerySet.as_manager()

    class Meta(TimeStampedModel.Meta):
        verbose_name = 'Listing'
        verbose_name_plural = 'Listings'
        indexes = [models.Index(fields=["available", "city"], name="listing_available_city_idx")]

    def __str__(self):
        return f"{self.title} ({self.city})"
