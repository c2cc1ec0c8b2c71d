from django.contrib import admin, messages
from rest_framework.exceptions import APIException

from .models import Listing
from ..bookings.cascade import delete_listing
from ..bookings.models import Booking


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ("renter", "move_in_date", "lease_duration", "status", "created_at")
    readonly_fields = fields  # status changes go through the booking actions
    show_change_link = True
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "owner", "type_housing", "type_ad", "city", "price", "bedrooms",
                    "available", "created_at")
    list_filter = ("available", "type_housing", "type_ad", "city", "created_at")
    search_fields = ("title", "description", "city", "owner__email", "owner__username")
    ordering = ("-created_at",)
    autocomplete_fields = ("owner",)  # AJAX search
    readonly_fields = ("available", "created_at", "updated_at")
    fieldsets = (
        (None, {"fields": ("title", "description", "type_housing", "type_ad", "price")}),
        ("Address", {"fields": ("street", "city", "state", "zip_code", "country")}),
        ("Details", {"fields": ("bedrooms", "bathrooms", "area", "parking", "furnished", "pets_allowed",
                                "amenities")}),
        ("Contact", {"fields": ("contact_phone", "contact_email")}),
        ("Owner", {"fields": ("owner", "available")}),
        ("Meta", {"fields": ("created_at", "updated_at")}),
    )
    inlines = [BookingInline]

    def get_deleted_objects(self, objs, request):
        deleted, model_count, perms_needed, _ = super().get_deleted_objects(objs, request)
        # PROTECTed bookings are removed by delete_listing
        return deleted, model_count, perms_needed, []

    def _delete(self, request, listing):
        try:
            delete_listing(listing.pk, request.user)
        except APIException as exc:
            messages.warning(request, f"Listing #{listing.pk}: {exc.detail}")

    def delete_model(self, request, obj):
        self._delete(request, obj)

    def delete_queryset(self, request, queryset):
        for listing in queryset:
            self._delete(request, listing)
