import django_filters as df

from .models import Listing
from ..core.enums import TypesHousing, TypesAd

class ListingFilter(df.FilterSet):
    """
    Filters the list of Listing instances.
    """
    type = df.ChoiceFilter(field_name="type_housing", choices=TypesHousing.choices)
    ad_type = df.ChoiceFilter(field_name="type_ad", choices=TypesAd.choices)
    min_price = df.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = df.NumberFilter(field_name="price", lookup_expr="lte")
    city = df.CharFilter(field_name="city", lookup_expr="icontains")
    bedrooms = df.NumberFilter(field_name="bedrooms", lookup_expr="gte")
    available = df.BooleanFilter(field_name="available")

    class Meta:
        model = Listing
        fields = []
