from rest_framework import serializers

from .models import Booking
from ..core.enums import StatusBooking
from ..listings.models import Listing
from .validators import validate_lease_duration, validate_move_in_date


class ListingStateSerializer(serializers.ModelSerializer):
    """Listing side effect of a booking transition."""
    class Meta:
        model = Listing
        fields = ("id", "title", "available")
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    listing_state = ListingStateSerializer(source="listing", read_only=True)
    renter_email = serializers.ReadOnlyField(source="renter.email")
    owner_email = serializers.ReadOnlyField(source="owner.email")
    lease_end_date = serializers.DateField(read_only=True)

    class Meta:
        model = Booking
        fields = ("id", "listing", "listing_state",
                  "renter", "renter_email", "owner", "owner_email",
                  "status", "reason",
                  "contact_name", "contact_phone", "contact_email", "message",
                  "move_in_date", "lease_duration", "lease_end_date",
                  "created_at", "updated_at")
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """CreateBooking request. Availability and duplicates are checked by the coordinator."""
    listing = serializers.IntegerField(min_value=1)
    contact_name = serializers.CharField(max_length=150)
    contact_phone = serializers.CharField(max_length=30)
    contact_email = serializers.EmailField()
    message = serializers.CharField(required=False, allow_blank=True, default="")
    move_in_date = serializers.DateField()
    lease_duration = serializers.IntegerField(min_value=1)

    def validate(self, attrs):
        validate_move_in_date(attrs["move_in_date"])
        validate_lease_duration(attrs["lease_duration"])
        return attrs


class BookingTransitionSerializer(serializers.Serializer):
    """TransitionBooking request (owner)."""
    status = serializers.ChoiceField(
        choices=[StatusBooking.APPROVED, StatusBooking.REJECTED, StatusBooking.COMPLETED])
    expected_status = serializers.ChoiceField(choices=StatusBooking.choices, required=False)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class BookingCancelSerializer(serializers.Serializer):
    """CancelBooking request (renter)."""
    expected_status = serializers.ChoiceField(choices=StatusBooking.choices, required=False)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
