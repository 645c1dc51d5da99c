import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .authentication import access_cookie_name, refresh_cookie_name
from .serializers import LoginSerializer, RegisterSerializer, UserAuthenticationSerializer

logger = logging.getLogger(__name__)


def _cookie_options():
    jwt_settings = settings.SIMPLE_JWT
    return {
        "httponly": jwt_settings.get("AUTH_COOKIE_HTTP_ONLY", True),
        "secure": jwt_settings.get("AUTH_COOKIE_SECURE", False),
        "samesite": jwt_settings.get("AUTH_COOKIE_SAMESITE", "Lax"),
    }


def set_auth_cookies(response, access_token, refresh_token=None):
    lifetimes = settings.SIMPLE_JWT
    options = _cookie_options()
    response.set_cookie(
        access_cookie_name(),
        access_token,
        max_age=int(lifetimes["ACCESS_TOKEN_LIFETIME"].total_seconds()),
        **options,
    )
    if refresh_token is not None:
        response.set_cookie(
            refresh_cookie_name(),
            refresh_token,
            max_age=int(lifetimes["REFRESH_TOKEN_LIFETIME"].total_seconds()),
            **options,
        )
    return response


def clear_auth_cookies(response):
    samesite = settings.SIMPLE_JWT.get("AUTH_COOKIE_SAMESITE", "Lax")
    response.delete_cookie(access_cookie_name(), samesite=samesite)
    response.delete_cookie(refresh_cookie_name(), samesite=samesite)
    return response


class PublicAuthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []


class RegisterView(PublicAuthView):
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Novo usuário registrado: %s", user.pk)

        refresh = RefreshToken.for_user(user)
        body = {
            "user": UserAuthenticationSerializer(user).data,
            "access": str(refresh.access_token),
        }
        return set_auth_cookies(
            Response(body, status=status.HTTP_201_CREATED),
            str(refresh.access_token),
            str(refresh),
        )


class LoginView(PublicAuthView):
    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        body = {"user": UserAuthenticationSerializer(data["user"]).data, "access": data["access"]}
        return set_auth_cookies(Response(body), data["access"], data["refresh"])


class RefreshView(PublicAuthView):
    def post(self, request):
        raw_refresh = request.data.get("refresh") or request.COOKIES.get(refresh_cookie_name())
        if not raw_refresh:
            return Response(
                {"detail": "Refresh token não informado."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            access = str(RefreshToken(raw_refresh).access_token)
        except TokenError:
            return clear_auth_cookies(
                Response(
                    {"detail": "Refresh token inválido ou expirado."},
                    status=status.HTTP_401_UNAUTHORIZED,
                )
            )
        return set_auth_cookies(Response({"access": access}), access)


class LogoutView(PublicAuthView):
    def post(self, request):
        return clear_auth_cookies(Response(status=status.HTTP_204_NO_CONTENT))


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"user": UserAuthenticationSerializer(request.user).data})
