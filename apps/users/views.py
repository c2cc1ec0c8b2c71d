import logging

from django.db.models import Count
from rest_framework import generics, mixins, permissions, viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from django.contrib.auth import authenticate
from RentalMarket.middleware import set_jwt_cookies, delete_jwt_cookies
from rest_framework.permissions import AllowAny, IsAuthenticated
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiResponse

from .models import User
from .serializers import UserLoggedInSerializer, RegisterUserSerializer, UserAdminSerializer
from ..bookings.cascade import delete_user
from ..core.enums import Roles
from ..core.permissions import AdminOnlyPermission

logger = logging.getLogger(__name__)


@extend_schema(
    description="Register a new user (renter or owner). On success sets JWT cookies (access_token, refresh_token). "
                "Owners must be approved by an admin before publishing listings.",
    request=RegisterUserSerializer,
    responses={
        201: OpenApiResponse(description="User registered and JWT cookies set"),
        400: OpenApiResponse(description="Validation error"),
    },
)
class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterUserSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        response = Response(
            {'user': {'id': user.id, 'username': user.username, 'email': user.email, 'role': user.role,
                      'is_approved': user.is_approved}},
            status=status.HTTP_201_CREATED)
        set_jwt_cookies(response, user)
        return response


@extend_schema(
    summary="Get current user (requires authentication).",
    request=None,
    responses={200: OpenApiResponse(response=UserLoggedInSerializer, description="Current user")},
)
@extend_schema(
    summary="Update current user (partial).",
    request=UserLoggedInSerializer,
    responses={
        200: OpenApiResponse(response=UserLoggedInSerializer, description="Profile updated"),
        400: OpenApiResponse(description="Validation error"),
    },
    methods=["PATCH"],
)
class UserLoggedInView(generics.RetrieveUpdateAPIView):
    serializer_class = UserLoggedInSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


@extend_schema(
    description=(
        "Login with email/password. On success sets JWT cookies "
        "(`access_token`, `refresh_token`). Body: `{ \"email\": \"...\", \"password\": \"...\" }`."
    ),
    request={
        "application/json": {
            "type": "object",
            "properties": {"email": {"type": "string", "format": "email"}, "password": {"type": "string"}},
        }
    },
    responses={
        200: OpenApiResponse(description="Authenticated; JWT cookies set"),
        401: OpenApiResponse(description="Invalid credentials"),
    },
)
class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        email = request.data.get("email") or request.data.get("username")
        password = request.data.get('password')
        user = authenticate(request, username=email, password=password)
        if not user:
            logger.info("failed login for %s", email)
            return Response({"detail": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)
        response = Response({"id": user.id, "role": user.role}, status=status.HTTP_200_OK)
        set_jwt_cookies(response, user)
        return response


@extend_schema(
    summary="Logout: clear JWT cookies (`access_token`, `refresh_token`).",
    request=None,
    responses={204: OpenApiResponse(description="Logged out; cookies cleared")},
)
class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        response = Response(status=status.HTTP_204_NO_CONTENT)
        delete_jwt_cookies(response)
        return response


@extend_schema_view(
    list=extend_schema(tags=["Admin"], summary="List users"),
    retrieve=extend_schema(tags=["Admin"], summary="Get user"),
    destroy=extend_schema(
        tags=["Admin"],
        summary="Delete user with all their listings and bookings",
        responses={
            204: OpenApiResponse(description="User and dependent data deleted"),
            403: OpenApiResponse(description="Forbidden"),
            404: OpenApiResponse(description="Not found"),
        },
    ),
)
class AdminUserViewSet(mixins.ListModelMixin,
                       mixins.RetrieveModelMixin,
                       mixins.DestroyModelMixin,
                       viewsets.GenericViewSet):
    """
    GET    /api/v1/admin/users/
    GET    /api/v1/admin/users/{id}/
    DELETE /api/v1/admin/users/{id}/                 # cascades to listings and bookings
    POST   /api/v1/admin/users/{id}/approve-owner/
    """
    serializer_class = UserAdminSerializer
    permission_classes = [IsAuthenticated, AdminOnlyPermission]
    lookup_value_regex = r"[0-9]+"

    def get_queryset(self):
        queryset = User.objects.annotate(listings_count=Count("listings")).order_by("-date_joined")
        role = self.request.query_params.get("role")
        if role:
            queryset = queryset.filter(role=role)
        pending = self.request.query_params.get("pending", "").lower()
        if pending in {"1", "true", "yes", "y"}:
            queryset = queryset.filter(role=Roles.OWNER, is_approved=False)
        return queryset

    def destroy(self, request, *args, **kwargs):
        delete_user(kwargs["pk"], request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Admin"],
        operation_id="user_approve_owner",
        summary="Approve an owner account",
        request=None,
        responses={
            200: OpenApiResponse(response=UserAdminSerializer, description="Owner approved"),
            400: OpenApiResponse(description="User is not an owner"),
        },
    )
    @action(detail=True, methods=["POST"], url_path="approve-owner")
    def approve_owner(self, request, pk=None):
        user = self.get_object()
        if user.role != Roles.OWNER:
            raise ValidationError({"role": "User is not an owner."})
        if not user.is_approved:
            user.is_approved = True
            user.save(update_fields=["is_approved"])
            logger.info("owner %s approved by admin %s", user.pk, request.user.pk)
        return Response(self.get_serializer(user).data, status=status.HTTP_200_OK)
