from __future__ import annotations

from rest_framework import permissions, status
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from drf_spectacular.utils import OpenApiResponse, extend_schema

from core.responses import success
from core.serializers import validate_request

from . import services
from .authentication import BearerTokenAuthentication
from .serializers import (
    AuthResultSerializer,
    CurrentUserSerializer,
    LoginSerializer,
    RegisterSerializer,
)


class PublicAuthView(APIView):
    """
    Base for the unauthenticated auth endpoints.

    No authenticator runs, so a stale `Authorization` header is ignored here.
    401 responses still advertise the Bearer scheme so DRF keeps them 401.
    """
    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def get_authenticate_header(self, request):
        return BearerTokenAuthentication.keyword


class RegisterView(PublicAuthView):
    """
    Create a new account and return it with a bearer token.
    Throttled with scope `auth-register`.
    """
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-register"

    @extend_schema(
        operation_id="auth_register",
        summary="Register a new account",
        tags=["Auth"],
        request=RegisterSerializer,
        responses={
            201: AuthResultSerializer,
            400: OpenApiResponse(description="Missing/invalid fields or email already registered"),
            429: OpenApiResponse(description="Too many attempts (throttled)"),
        },
    )
    def post(self, request, *args, **kwargs):
        data = validate_request(
            RegisterSerializer(data=request.data),
            message=services.MISSING_CREDENTIALS_MESSAGE,
        )
        result = services.register_user(data["email"], data["password"], data.get("name"))
        return success(
            AuthResultSerializer(result).data,
            message="User registered successfully",
            status=status.HTTP_201_CREATED,
        )


class LoginView(PublicAuthView):
    """
    Exchange email + password for a bearer token.
    Throttled with scope `auth-login`.
    """
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth-login"

    @extend_schema(
        operation_id="auth_login",
        summary="Log in",
        tags=["Auth"],
        request=LoginSerializer,
        responses={
            200: AuthResultSerializer,
            400: OpenApiResponse(description="Missing email or password"),
            401: OpenApiResponse(description='{"success": false, "message": "Invalid email or password"}'),
            429: OpenApiResponse(description="Too many attempts (throttled)"),
        },
    )
    def post(self, request, *args, **kwargs):
        data = validate_request(
            LoginSerializer(data=request.data),
            message=services.MISSING_CREDENTIALS_MESSAGE,
        )
        result = services.login_user(data["email"], data["password"], request=request)
        return success(AuthResultSerializer(result).data, message="Login successful")


class MeView(APIView):
    """
    Return the current authenticated user.
    """
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Current user",
        tags=["Auth"],
        responses={200: CurrentUserSerializer, 401: OpenApiResponse(description="Missing or invalid token")},
    )
    def get(self, request, *args, **kwargs):
        user = services.get_current_user(request.user.pk)
        return success(CurrentUserSerializer(user).data)
