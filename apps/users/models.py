from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from ..core.enums import Roles


class User(AbstractUser):
    email = models.EmailField(_("email address"), unique=True)
    role = models.CharField(max_length=20, choices=Roles.choices, default=Roles.RENTER, verbose_name=_("Role"))
    nickname = models.CharField(_("nickname"), max_length=30, blank=True, null=True, help_text=_("Visible to others"))
    phone = models.CharField(_("phone"), max_length=30, blank=True, default="")
    is_approved = models.BooleanField(
        default=True,
        help_text=_("Owners must be approved by an admin before they can publish listings."),
        verbose_name=_("Is approved"),
    )

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ['username', 'first_name', 'last_name']

    def __str__(self):
        return f"{self.username} - {self.role}"
