from rest_framework import mixins, viewsets, response, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiExample, extend_schema_view

from ..core.permissions import BookingCreatePermission, IsOwnerPermission, IsRenterPermission
from .coordinator import request_booking, transition_booking, cancel_booking
from .models import Booking
from .serializers import (BookingSerializer, BookingCreateSerializer, BookingTransitionSerializer,
                          BookingCancelSerializer)


@extend_schema_view(
    list=extend_schema(tags=["Bookings"], summary="List bookings visible to the current user"),
    retrieve=extend_schema(tags=["Bookings"], summary="Get booking"),
)
class BookingViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    Bookings are never edited or deleted through the API: they are created with
    POST /bookings/ and then only moved through /status/ and /cancel/.
    """
    queryset = Booking.objects.all().select_related("listing", "renter", "owner")
    lookup_value_regex = r"[0-9]+"
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]

    def get_permissions(self):
        action = getattr(self, "action", None)
        if action == "create":
            return [IsAuthenticated(), BookingCreatePermission()]
        if action == "owner":
            return [IsAuthenticated(), IsOwnerPermission()]
        if action == "renter":
            return [IsAuthenticated(), IsRenterPermission()]
        return [perm() for perm in self.permission_classes]

    def get_queryset(self):
        """
        Renter sees their bookings. Owner sees bookings for their listings. Admin sees all.
        Anything else is a 404, not a 403.
        """
        return super().get_queryset().visible_to(self.request.user)

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return response.Response(self.get_serializer(queryset, many=True).data)

    @extend_schema(
        tags=["Bookings"],
        operation_id="booking_create",
        summary="Request a booking (renter)",
        request=BookingCreateSerializer,
        responses={
            201: OpenApiResponse(response=BookingSerializer, description="Booking created as pending"),
            400: OpenApiResponse(description="Validation error"),
            404: OpenApiResponse(description="Listing not found"),
            409: OpenApiResponse(description="Listing not available / pending booking already exists"),
        },
    )
    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        listing_id = data.pop("listing")
        booking = request_booking(request.user, listing_id, data)
        return response.Response(self.get_serializer(booking).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Bookings"], summary="Bookings made by the current renter")
    @action(detail=False, methods=["GET"])
    def renter(self, request):
        return self._paginated(self.get_queryset().for_renter(request.user))

    @extend_schema(tags=["Bookings"], summary="Bookings on the current owner's listings")
    @action(detail=False, methods=["GET"])
    def owner(self, request):
        return self._paginated(self.get_queryset().for_owner(request.user))

    @extend_schema(
        tags=["Bookings"],
        operation_id="booking_transition",
        summary="Approve / reject / complete a booking (listing owner)",
        request=BookingTransitionSerializer,
        responses={
            200: OpenApiResponse(response=BookingSerializer, description="Booking and listing updated"),
            403: OpenApiResponse(description="Forbidden"),
            404: OpenApiResponse(description="Not found"),
            409: OpenApiResponse(description="Invalid transition / status changed / listing not available"),
        },
        examples=[
            OpenApiExample("Approve", value={"status": "approved", "expected_status": "pending"}, request_only=True),
            OpenApiExample("Success", value={"id": 123, "status": "approved",
                                             "listing_state": {"id": 7, "title": "Loft", "available": False}},
                           response_only=True),
        ],
    )
    @action(detail=True, methods=["POST", "PUT"], url_path="status")
    def transition(self, request, pk=None):
        """
        Action - TransitionBooking
        :param request: POST /api/v1/bookings/{id}/status/ {status, expected_status?, reason?}
        """
        serializer = BookingTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = transition_booking(
            pk,
            serializer.validated_data["status"],
            request.user,
            expected_status=serializer.validated_data.get("expected_status"),
            reason=serializer.validated_data.get("reason", ""),
        )
        return response.Response(self.get_serializer(booking).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Bookings"],
        operation_id="booking_cancel",
        summary="Cancel a pending booking (renter)",
        request=BookingCancelSerializer,
        responses={
            200: OpenApiResponse(response=BookingSerializer, description="Cancelled"),
            403: OpenApiResponse(description="Forbidden"),
            404: OpenApiResponse(description="Not found"),
            409: OpenApiResponse(description="Only pending bookings can be cancelled"),
        },
        examples=[OpenApiExample("Success", value={"id": 123, "status": "cancelled"}, response_only=True)],
    )
    @action(detail=True, methods=["POST", "PUT"])
    def cancel(self, request, pk=None):
        """
        Action - CancelBooking
        :param request: POST /api/v1/bookings/{id}/cancel/ {reason?, expected_status?}
        """
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = cancel_booking(
            pk,
            request.user,
            reason=serializer.validated_data.get("reason", ""),
            expected_status=serializer.validated_data.get("expected_status"),
        )
        return response.Response(self.get_serializer(booking).data, status=status.HTTP_200_OK)
