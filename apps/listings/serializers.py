from rest_framework import serializers

from .models import Listing
from .services import create_listing, reject_read_only, update_listing


class ListingSerializer(serializers.ModelSerializer):
    owner_id = serializers.ReadOnlyField()
    amenities = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = Listing
        fields = ("id", "owner_id", "title", "type_housing", "type_ad", "price",
                  "street", "city", "state", "zip_code", "country",
                  "contact_phone", "contact_email",
                  "bedrooms", "bathrooms", "area", "parking", "furnished", "pets_allowed",
                  "description", "amenities",
                  "available", "created_at", "updated_at")
        read_only_fields = ("available", "created_at", "updated_at")

    def validate(self, attrs):
        reject_read_only(self.initial_data)
        owner = self.context["request"].user
        city = attrs.get("city", getattr(self.instance, "city", "")) or ""
        street = attrs.get("street", getattr(self.instance, "street", "")) or ""

        if street:
            owner_id = self.instance.owner_id if self.instance else owner.id
            qs = Listing.objects.filter(owner_id=owner_id, city__iexact=city, street__iexact=street)
            if self.instance:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError({
                    "non_field_errors": ["Listing with the same (owner, city, street) already exists."]
                })
        return attrs

    def create(self, validated_data):
        return create_listing(self.context["request"].user, validated_data)

    def update(self, instance, validated_data):
        return update_listing(instance, self.context["request"].user, validated_data)
