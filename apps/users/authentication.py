from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


def access_cookie_name():
    return settings.SIMPLE_JWT.get("AUTH_COOKIE", "access_token")


def refresh_cookie_name():
    return settings.SIMPLE_JWT.get("AUTH_COOKIE_REFRESH", "refresh_token")


class CookieJWTAuthentication(JWTAuthentication):
    """Aceita o access token no header Authorization ou no cookie HttpOnly."""

    def authenticate(self, request):
        if self.get_header(request) is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(access_cookie_name())
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
