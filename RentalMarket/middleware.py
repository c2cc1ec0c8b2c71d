import logging
from datetime import datetime, timezone

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from django.utils.deprecation import MiddlewareMixin
from rest_framework_simplejwt.tokens import RefreshToken, AccessToken
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


def _expiry(token) -> datetime:
    # token['exp'] is a UNIX timestamp (UTC)
    return datetime.fromtimestamp(token["exp"], tz=timezone.utc)


def _set_cookie(response, key, value, expires):
    response.set_cookie(
        key=key,
        value=value,
        httponly=True,
        secure=getattr(settings, "AUTH_COOKIE_SECURE", False),
        samesite="Lax",
        expires=expires,
        path="/",
    )


def set_jwt_cookies(response: HttpResponse, user) -> None:
    """Issues a fresh token pair for `user` and stores it in httpOnly cookies."""
    refresh = RefreshToken.for_user(user)
    access = refresh.access_token
    _set_cookie(response, ACCESS_COOKIE, str(access), _expiry(access))
    _set_cookie(response, REFRESH_COOKIE, str(refresh), _expiry(refresh))


def delete_jwt_cookies(response: HttpResponse) -> None:
    response.delete_cookie(ACCESS_COOKIE, path="/")
    response.delete_cookie(REFRESH_COOKIE, path="/")


class CsrfBypassForApi(MiddlewareMixin):
    """
    Disables CSRF validation for `/api/` routes: they authenticate with JWT, not the session.
    """
    def process_request(self, request: HttpRequest) -> None:
        if request.path.startswith("/api/"):
            setattr(request, "_dont_enforce_csrf_checks", True)


class JWTAuthenticationMiddleware(MiddlewareMixin):
    """
    Injects `Authorization: Bearer <access>` from httpOnly cookies.

    Flow:
        1. A valid `access_token` cookie is proxied to DRF as the Authorization header.
        2. A missing or expired access token is re-minted from `refresh_token`;
           the new one is proxied and written back as a cookie in `process_response`.
        3. If the refresh token is invalid too, both cookies are deleted in the response
           and the request goes on anonymous.
    An explicit Authorization header sent by the client is left alone.
    """
    def process_request(self, request: HttpRequest) -> None:
        if "HTTP_AUTHORIZATION" in request.META:
            return
        access_token = request.COOKIES.get(ACCESS_COOKIE)
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if access_token:
            try:
                AccessToken(access_token)
                request.META["HTTP_AUTHORIZATION"] = f"Bearer {access_token}"
                return
            except TokenError:
                pass  # expired or tampered, fall through to refresh
        if not refresh_token:
            if access_token:
                request._clear_jwt_cookies = True
            return

        new_access_token = self.refresh_access_token(refresh_token)
        if new_access_token:
            request.META["HTTP_AUTHORIZATION"] = f"Bearer {new_access_token}"
            request._new_access_token = new_access_token
        else:
            request._clear_jwt_cookies = True

    def refresh_access_token(self, refresh_token):
        try:
            return str(RefreshToken(refresh_token).access_token)
        except TokenError as exc:
            logger.info("refresh token rejected: %s", exc)
            return None

    def process_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        if getattr(request, "_clear_jwt_cookies", False):
            delete_jwt_cookies(response)
            return response
        new_access_token = getattr(request, "_new_access_token", None)
        # a login/logout view may have replaced the cookies already
        if new_access_token and ACCESS_COOKIE not in response.cookies:
            _set_cookie(response, ACCESS_COOKIE, new_access_token, _expiry(AccessToken(new_access_token)))
        return response
