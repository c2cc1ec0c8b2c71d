from django.contrib import admin, messages
from rest_framework.exceptions import APIException

from .coordinator import moderate_booking
from .models import Booking
from ..core.enums import StatusBooking


def _moderate(request, queryset, target_status, label):
    ok, skipped = 0, 0
    for pk in queryset.values_list("pk", flat=True):
        try:
            moderate_booking(pk, target_status, request.user, reason=f"{label} by admin")
        except APIException as exc:
            messages.warning(request, f"Booking #{pk}: {exc.detail}")
            skipped += 1
            continue
        ok += 1
    if ok:
        messages.success(request, f"{label}: {ok}")
    if skipped:
        messages.info(request, f"Skipped: {skipped}")


@admin.action(description="Mark selected as APPROVED")
def approve_bookings(modeladmin, request, queryset):
    _moderate(request, queryset, StatusBooking.APPROVED, "Approved")


@admin.action(description="Mark selected as REJECTED")
def reject_bookings(modeladmin, request, queryset):
    _moderate(request, queryset, StatusBooking.REJECTED, "Rejected")


@admin.action(description="Mark selected as COMPLETED (lease ended)")
def complete_bookings(modeladmin, request, queryset):
    _moderate(request, queryset, StatusBooking.COMPLETED, "Completed")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "listing", "renter", "owner", "status", "move_in_date", "lease_duration", "created_at")
    list_filter = ("status", "created_at", "move_in_date")
    search_fields = ("listing__title", "renter__email", "renter__username", "owner__email")
    ordering = ("-created_at",)
    autocomplete_fields = ("listing", "renter", "owner")
    date_hierarchy = "move_in_date"
    readonly_fields = ("status", "reason", "created_at", "updated_at")

    fieldsets = (
        (None, {"fields": ("listing", "renter", "owner")}),
        ("Lease", {"fields": ("move_in_date", "lease_duration")}),
        ("Contact", {"fields": ("contact_name", "contact_phone", "contact_email", "message")}),
        ("Status", {"fields": ("status", "reason")}),
        ("Meta", {"fields": ("created_at", "updated_at")}),
    )

    actions = [approve_bookings, reject_bookings, complete_bookings]

    # bookings are requested through the API so that availability is checked
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
