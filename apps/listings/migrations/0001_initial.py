import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Listing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("title", models.CharField(max_length=120, verbose_name="Title")),
                ("type_housing", models.CharField(
                    choices=[("apartment", "Apartment"), ("house", "House"), ("room", "Room"),
                             ("studio", "Studio"), ("villa", "Villa")],
                    default="apartment", max_length=20, verbose_name="Type")),
                ("type_ad", models.CharField(choices=[("rent", "Rent"), ("sale", "Sale")], default="rent",
                                             max_length=10, verbose_name="Ad type")),
                ("price", models.DecimalField(decimal_places=2, max_digits=12,
                                              validators=[django.core.validators.MinValueValidator(0)],
                                              verbose_name="Price")),
                ("street", models.CharField(blank=True, default="", max_length=255, verbose_name="Street")),
                ("city", models.CharField(max_length=100, verbose_name="City")),
                ("state", models.CharField(blank=True, default="", max_length=100, verbose_name="State")),
                ("zip_code", models.CharField(blank=True, default="", max_length=20, verbose_name="Zip code")),
                ("country", models.CharField(blank=True, default="", max_length=100, verbose_name="Country")),
                ("contact_phone", models.CharField(blank=True, default="", max_length=30,
                                                   verbose_name="Contact phone")),
                ("contact_email", models.EmailField(blank=True, default="", max_length=254,
                                                    verbose_name="Contact email")),
                ("bedrooms", models.PositiveSmallIntegerField(default=0, verbose_name="Bedrooms")),
                ("bathrooms", models.PositiveSmallIntegerField(default=0, verbose_name="Bathrooms")),
                ("area", models.PositiveIntegerField(blank=True, null=True, verbose_name="Area, m²")),
                ("parking", models.BooleanField(default=False, verbose_name="Parking")),
                ("furnished", models.BooleanField(default=False, verbose_name="Furnished")),
                ("pets_allowed", models.BooleanField(default=False, verbose_name="Pets allowed")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("amenities", models.JSONField(blank=True, default=list, verbose_name="Amenities")),
                ("available", models.BooleanField(default=True, editable=False, verbose_name="Available")),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="listings",
                                            to=settings.AUTH_USER_MODEL, verbose_name="Owner")),
            ],
            options={
                "verbose_name": "Listing",
                "verbose_name_plural": "Listings",
                "ordering": ("-created_at",),
                "abstract": False,
                "indexes": [models.Index(fields=["available", "city"], name="listing_available_city_idx")],
            },
        ),
    ]
