from django.conf import settings
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from django.db import transaction

from apps.core.enums import Roles

User = get_user_model()

USERS = [
    # owners
    {"email": "owner1@example.com", "username": "owner1", "first_name": "Owner", "last_name": "One", "role": Roles.OWNER},
    {"email": "owner2@example.com", "username": "owner2", "first_name": "Owner", "last_name": "Two", "role": Roles.OWNER},
    # renters
    {"email": "renter1@example.com", "username": "renter1", "first_name": "Renter", "last_name": "One", "role": Roles.RENTER},
    {"email": "renter2@example.com", "username": "renter2", "first_name": "Renter", "last_name": "Two", "role": Roles.RENTER},
    # admin
    {"email": "admin@example.com", "username": "admin", "first_name": "Admin", "last_name": "Adm", "role": Roles.ADMIN},
]


class Command(BaseCommand):
    help = "Seed demo users (owners, renters, admin). Seeded owners are approved."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=getattr(settings, "SEED_USERS_PASSWORD", "SecurePassword1!"),
                            help="Password for newly created users")

    def handle(self, *args, **options):
        created = 0
        for data in USERS:
            with transaction.atomic():
                user, was_created = User.objects.get_or_create(
                    email=data["email"],
                    defaults={
                        "username": data["username"],
                        "first_name": data.get("first_name", ""),
                        "last_name": data.get("last_name", ""),
                        "role": data["role"],
                    },
                )
                if data["role"] == Roles.ADMIN:
                    user.is_staff = True
                    user.is_superuser = True
                user.role = data["role"]
                user.is_approved = True

                if was_created:
                    user.set_password(options["password"])
                    user.save()
                    created += 1
                    self.stdout.write(self.style.SUCCESS(f"[OK] {data['email']} ({data['role']}) created"))
                else:
                    user.save(update_fields=["role", "is_approved", "is_staff", "is_superuser"])
                    self.stdout.write(self.style.WARNING(f"[SKIP] {data['email']} already there"))

        self.stdout.write(self.style.SUCCESS(f"Done. Created Users: {created}/{len(USERS)}"))
