"""Store settings repositories package."""

from modules.store_settings.repositories.django_repository import (
    SettingDjangoRepository,
)
from modules.store_settings.repositories.interfaces import ISettingRepository

__all__ = ["ISettingRepository", "SettingDjangoRepository"]
