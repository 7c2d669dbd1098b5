"""Authentication endpoints (``/api/v1/auth/``)."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from modules.accounts.dtos import RegisterUserDTO
from modules.accounts.exceptions import EmailAlreadyRegistered, IncorrectPassword
from modules.accounts.serializers import (
    ChangePasswordSerializer,
    EmailTokenObtainPairSerializer,
    RegisterSerializer,
)
from modules.accounts.services import AccountService, issue_tokens, profile


class RegisterView(APIView):
    """POST /api/v1/auth/register/"""

    permission_classes = [AllowAny]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = RegisterUserDTO(**serializer.validated_data)
            user = AccountService().register(dto)
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except EmailAlreadyRegistered as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(
            {"user": profile(user), "tokens": issue_tokens(user)},
            status=status.HTTP_201_CREATED,
        )


class LoginView(TokenObtainPairView):
    """POST /api/v1/auth/token/"""

    serializer_class = EmailTokenObtainPairSerializer
    throttle_scope = "auth"


class MeView(APIView):
    """GET /api/v1/auth/me/"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(profile(request.user))


class ChangePasswordView(APIView):
    """POST /api/v1/auth/change-password/"""

    permission_classes = [IsAuthenticated]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = ChangePasswordSerializer(
            data=request.data, context={"user": request.user}
        )
        serializer.is_valid(raise_exception=True)

        try:
            AccountService().change_password(
                request.user,
                serializer.validated_data["current_password"],
                serializer.validated_data["new_password"],
            )
        except IncorrectPassword as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({"detail": "Password updated successfully."})
