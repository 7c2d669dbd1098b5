"""Account use cases.

Users are Django ``auth.User`` rows whose ``username`` is the lower-cased
e-mail; the display name is kept in ``first_name``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

import structlog
from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.exceptions import EmailAlreadyRegistered, IncorrectPassword

if TYPE_CHECKING:
    from modules.accounts.dtos import RegisterUserDTO

logger = structlog.get_logger(__name__)


def issue_tokens(user) -> Dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


def profile(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.first_name or user.get_username(),
        "email": user.email,
        "is_admin": bool(user.is_staff),
        "date_joined": user.date_joined,
    }


class AccountService:
    def __init__(self) -> None:
        self._users = get_user_model()

    @transaction.atomic
    def register(self, dto: RegisterUserDTO):
        """Create a customer account.

        Raises:
            EmailAlreadyRegistered: the e-mail is taken (case-insensitive).
        """
        if self._users.objects.filter(email__iexact=dto.email).exists() or (
            self._users.objects.filter(username__iexact=dto.email).exists()
        ):
            logger.warning("account.duplicate_email")
            raise EmailAlreadyRegistered("User already exists with this email.")

        user = self._users.objects.create_user(
            username=dto.email,
            email=dto.email,
            password=dto.password,
            first_name=dto.name,
        )
        logger.info("account.registered", user_id=user.id)
        return user

    def change_password(self, user, current_password: str, new_password: str) -> None:
        """Raises ``IncorrectPassword`` when ``current_password`` is wrong."""
        if not user.check_password(current_password):
            logger.warning("account.password_change_rejected", user_id=user.id)
            raise IncorrectPassword("Current password is incorrect.")
        user.set_password(new_password)
        user.save(update_fields=["password"])
        logger.info("account.password_changed", user_id=user.id)
