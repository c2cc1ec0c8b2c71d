from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from rest_framework.exceptions import APIException

from .models import User
from ..bookings.cascade import delete_user
from ..core.enums import Roles


@admin.action(description="Approve selected owners")
def approve_owners(modeladmin, request, queryset):
    updated = queryset.filter(role=Roles.OWNER, is_approved=False).update(is_approved=True)
    if updated:
        messages.success(request, f"Approved owners: {updated}")
    else:
        messages.info(request, "There are no unapproved owners among the selected ones")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "username", "first_name", "last_name", "role", "is_approved", "is_staff", "is_active")
    list_filter = ("is_staff", "is_superuser", "is_active", "role", "is_approved")
    search_fields = ("email", "username", "first_name", "last_name")
    ordering = ("email",)
    actions = [approve_owners]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal info", {"fields": ("username", "first_name", "last_name", "nickname", "phone", "role")}),
        ("Permissions", {"fields": ("is_approved", "is_active", "is_staff")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "username", "first_name", "last_name", "password1", "password2", "role", "is_staff",),
        }),
    )

    def get_deleted_objects(self, objs, request):
        deleted, model_count, perms_needed, _ = super().get_deleted_objects(objs, request)
        return deleted, model_count, perms_needed, []

    def _delete(self, request, user):
        # listings and bookings are PROTECTed, the cascade removes them first
        try:
            delete_user(user.pk, request.user)
        except APIException as exc:
            messages.warning(request, f"User {user.email}: {exc.detail}")

    def delete_model(self, request, obj):
        self._delete(request, obj)

    def delete_queryset(self, request, queryset):
        for user in queryset:
            self._delete(request, user)
