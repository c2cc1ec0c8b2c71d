import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("listings", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("status", models.CharField(
                    choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected"),
                             ("cancelled", "Cancelled"), ("completed", "Completed")],
                    default="pending", editable=False, max_length=10, verbose_name="Status")),
                ("contact_name", models.CharField(max_length=150, verbose_name="Name")),
                ("contact_phone", models.CharField(max_length=30, verbose_name="Phone")),
                ("contact_email", models.EmailField(max_length=254, verbose_name="Email")),
                ("message", models.TextField(blank=True, default="", verbose_name="Message")),
                ("move_in_date", models.DateField(verbose_name="Move-in date")),
                ("lease_duration", models.PositiveSmallIntegerField(
                    help_text="Lease duration in months.",
                    validators=[django.core.validators.MinValueValidator(1)],
                    verbose_name="Lease duration")),
                ("reason", models.CharField(blank=True, default="", max_length=500, verbose_name="Reason")),
                ("listing", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings",
                                              to="listings.listing", verbose_name="Listing")),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT,
                                            related_name="received_bookings", to=settings.AUTH_USER_MODEL,
                                            verbose_name="Owner")),
                ("renter", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings",
                                             to=settings.AUTH_USER_MODEL, verbose_name="Renter")),
            ],
            options={
                "ordering": ("-created_at",),
                "abstract": False,
                "indexes": [models.Index(fields=["listing", "status"], name="booking_listing_status_idx")],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("status", "approved")), fields=("listing",),
                                            name="one_approved_booking_per_listing"),
                    models.UniqueConstraint(condition=models.Q(("status", "pending")), fields=("listing", "renter"),
                                            name="one_pending_booking_per_renter"),
                ],
            },
        ),
    ]
