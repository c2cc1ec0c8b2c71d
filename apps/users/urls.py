from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import RegisterView, LoginView, LogoutView, UserLoggedInView, AdminUserViewSet

router = DefaultRouter()
router.register(r"admin/users", AdminUserViewSet, basename="admin-users")

urlpatterns = [
    path("user/register/", RegisterView.as_view(), name='register'),
    path("user/login/", LoginView.as_view(), name='login'),
    path('user/logout/', LogoutView.as_view(), name='logout'),
    path("user/me/", UserLoggedInView.as_view(), name="me"),
] + router.urls
