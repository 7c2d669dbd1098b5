from __future__ import annotations

from django.contrib.auth import authenticate, password_validation
from django.contrib.auth.models import update_last_login
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.settings import api_settings


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        password_validation.validate_password(
            attrs["password"],
            user=_Candidate(attrs.get("email", ""), attrs.get("name", "")),
        )
        return attrs


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True, trim_whitespace=False)
    new_password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_new_password(self, value):
        password_validation.validate_password(value, user=self.context.get("user"))
        return value


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Log in with ``{"email", "password"}``; tokens carry name and role."""

    username_field = "email"

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["name"] = user.first_name
        token["is_admin"] = bool(user.is_staff)
        return token

    def validate(self, attrs):
        user = authenticate(
            self.context.get("request"),
            username=attrs["email"].strip().lower(),
            password=attrs["password"],
        )
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed(
                self.error_messages["no_active_account"], "no_active_account"
            )
        self.user = user

        refresh = self.get_token(user)
        if api_settings.UPDATE_LAST_LOGIN:
            update_last_login(None, user)
        return {"refresh": str(refresh), "access": str(refresh.access_token)}


class _Candidate:
    """Attributes ``UserAttributeSimilarityValidator`` compares against."""

    def __init__(self, email: str, name: str) -> None:
        self.username = email
        self.email = email
        self.first_name = name
