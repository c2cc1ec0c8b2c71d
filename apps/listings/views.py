from rest_framework import viewsets, permissions, filters, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (extend_schema, extend_schema_view, OpenApiParameter, OpenApiTypes,
                                   OpenApiResponse)

from ..bookings.cascade import delete_listing
from ..core.permissions import ListingCreatePermission, ListingChangeDeletePermission, IsOwnerPermission
from .models import Listing
from .serializers import ListingSerializer
from .filters import ListingFilter


@extend_schema_view(
    list=extend_schema(
        tags=["Listings"],
        summary="List listings",
        parameters=[
            OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY,
                             description="Search in title/description/city"),
            OpenApiParameter("type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("ad_type", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("min_price", OpenApiTypes.DECIMAL, OpenApiParameter.QUERY),
            OpenApiParameter("max_price", OpenApiTypes.DECIMAL, OpenApiParameter.QUERY),
            OpenApiParameter("city", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("bedrooms", OpenApiTypes.INT, OpenApiParameter.QUERY, description="Minimum bedrooms"),
            OpenApiParameter("available", OpenApiTypes.BOOL, OpenApiParameter.QUERY,
                             description="Defaults to true: only listings open for booking"),
            OpenApiParameter("ordering", OpenApiTypes.STR, OpenApiParameter.QUERY,
                             description="Sort fields. Ex: price,-created_at"),
        ],
    ),
    retrieve=extend_schema(tags=["Listings"], summary="Get listing"),
    create=extend_schema(tags=["Listings"], summary="Create listing (approved owner)"),
    update=extend_schema(tags=["Listings"], summary="Update listing (owner). `available` is read-only"),
    partial_update=extend_schema(tags=["Listings"], summary="Patch listing (owner). `available` is read-only"),
    destroy=extend_schema(
        tags=["Listings"],
        summary="Delete listing with its bookings (owner or admin)",
        responses={
            204: OpenApiResponse(description="Listing and its bookings deleted"),
            403: OpenApiResponse(description="Forbidden"),
            404: OpenApiResponse(description="Not found"),
        },
    ),
)
class ListingViewSet(viewsets.ModelViewSet):
    queryset = Listing.objects.all().select_related("owner")
    serializer_class = ListingSerializer
    permission_classes = [permissions.AllowAny] # read for all

    filterset_class = ListingFilter
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter,]
    search_fields = ["title", "description", "city"]
    ordering_fields = ["price", "created_at", "bedrooms"]
    ordering = ["-created_at"]

    def get_permissions(self):
        """
        Access rights depending on the action being performed (HTTP methods).
        """
        if self.action == "create": # for POST
            return [permissions.IsAuthenticated(), ListingCreatePermission()]

        if self.action in ("update", "partial_update", "destroy"): # for PUT/PATCH/DELETE
            return [permissions.IsAuthenticated(), ListingChangeDeletePermission()]

        if self.action == "mine":
            return [permissions.IsAuthenticated(), IsOwnerPermission()]

        return [permissions.AllowAny()]

    def get_queryset(self):
        """
        Public list shows only listings open for booking unless ?available= is given.
        """
        queryset = super().get_queryset()
        if self.action == "list" and "available" not in self.request.query_params:
            queryset = queryset.available()
        return queryset

    def destroy(self, request, *args, **kwargs):
        listing = self.get_object()
        delete_listing(listing.pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Listings"], summary="Listings of the current owner (available or not)")
    @action(detail=False, methods=["GET"])
    def mine(self, request):
        queryset = Listing.objects.owned_by(request.user).order_by("-created_at")
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)
