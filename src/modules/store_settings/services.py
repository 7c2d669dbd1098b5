"""Store settings service layer.

The whole key -> value map is cached in the Django cache (Redis in
production) and dropped on every write, so checkout reads of tax and
shipping settings cost one cache hit.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.conf import settings as django_settings
from django.core.cache import cache
from django.db import transaction

from modules.store_settings.constants import (
    CACHE_KEY,
    DEFAULT_SETTINGS,
    NON_NEGATIVE_KEYS,
    PRIVATE_CATEGORIES,
    SettingCategory,
    SettingType,
)
from modules.store_settings.exceptions import InvalidSettingValue, SettingNotFound
from modules.store_settings.models import Setting, parse_value, stringify_value

if TYPE_CHECKING:
    from modules.store_settings.repositories.interfaces import ISettingRepository

logger = structlog.get_logger(__name__)

_DEFAULTS_BY_KEY = {row[0]: row for row in DEFAULT_SETTINGS}


def default_value(key: str) -> Any:
    """Typed value of a built-in default, or ``None`` for unknown keys."""
    row = _DEFAULTS_BY_KEY.get(key)
    if row is None:
        return None
    return parse_value(row[1], row[2])


def encode_value(key: str, value: Any, value_type: str) -> str:
    """Stored text for ``value``, with the checkout amounts kept non-negative."""
    raw = stringify_value(value, value_type)
    if (
        key in NON_NEGATIVE_KEYS
        and value_type == SettingType.NUMBER
        and parse_value(raw, value_type) < 0
    ):
        raise InvalidSettingValue(f"'{key}' cannot be negative.")
    return raw


class StoreSettingsService:
    def __init__(self, repository: ISettingRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def _load(self) -> Dict[str, Dict[str, Any]]:
        entries = cache.get(CACHE_KEY)
        if entries is None:
            entries = {
                s.key: {"value": s.typed_value, "category": s.category}
                for s in self._repo.all()
            }
            cache.set(
                CACHE_KEY,
                entries,
                getattr(django_settings, "STORE_SETTINGS_CACHE_TIMEOUT", 300),
            )
            logger.debug("settings.cache_loaded", count=len(entries))
        return entries

    def invalidate_cache(self) -> None:
        cache.delete(CACHE_KEY)

    def _invalidate_after_write(self) -> None:
        self.invalidate_cache()
        transaction.on_commit(self.invalidate_cache)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Typed value for ``key``.

        Falls back to ``default`` and then to the built-in default.
        """
        entry = self._load().get(key)
        if entry is not None:
            return entry["value"]
        if default is not None:
            return default
        return default_value(key)

    def get_decimal(self, key: str, default: Optional[Decimal] = None) -> Decimal:
        value = self.get_setting(key, default)
        if value is None:
            return Decimal("0")
        return Decimal(str(value))

    def get_by_category(self, category: str) -> Dict[str, Any]:
        return {
            key: entry["value"]
            for key, entry in self._load().items()
            if entry["category"] == category
        }

    def get_all(self) -> Dict[str, Any]:
        return {key: entry["value"] for key, entry in self._load().items()}

    def get_public(self, category: Optional[str] = None) -> Dict[str, Any]:
        """Settings safe to expose to storefront visitors."""
        return {
            key: entry["value"]
            for key, entry in self._load().items()
            if entry["category"] not in PRIVATE_CATEGORIES
            and (category is None or entry["category"] == category)
        }

    def get_record(self, key: str) -> Setting:
        setting = self._repo.get_by_key(key)
        if not setting:
            raise SettingNotFound(f"Setting '{key}' not found.")
        return setting

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def set_setting(
        self,
        key: str,
        value: Any,
        value_type: Optional[str] = None,
        category: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Setting:
        """Create or update a setting.

        Raises:
            InvalidSettingValue: ``value`` does not fit the setting type.
        """
        setting = self._repo.get_by_key(key)
        if setting is None:
            default = _DEFAULTS_BY_KEY.get(key)
            setting = Setting(
                key=key,
                value_type=value_type or (default[2] if default else SettingType.STRING),
                category=category or (default[3] if default else SettingCategory.GENERAL),
                description=description or (default[4] if default else ""),
            )
        else:
            if value_type:
                setting.value_type = value_type
            if category:
                setting.category = category
            if description is not None:
                setting.description = description

        setting.value = encode_value(key, value, setting.value_type)
        setting = self._repo.save(setting)
        self._invalidate_after_write()
        logger.info("settings.updated", key=key, category=setting.category)
        return setting

    @transaction.atomic
    def bulk_update(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Update several existing settings at once.

        Every key must already exist; the whole batch is rejected otherwise.

        Raises:
            SettingNotFound: a key is not stored.
            InvalidSettingValue: a value does not fit its setting type.
        """
        records = {}
        for key in values:
            setting = self._repo.get_by_key(key)
            if setting is None:
                raise SettingNotFound(f"Setting '{key}' not found.")
            records[key] = setting

        for key, value in values.items():
            setting = records[key]
            setting.value = encode_value(key, value, setting.value_type)
            self._repo.save(setting)

        self._invalidate_after_write()
        logger.info("settings.bulk_updated", keys=sorted(values))
        return {key: records[key].typed_value for key in values}

    @transaction.atomic
    def initialize_defaults(self) -> int:
        """Insert any missing built-in setting. Existing values are kept.

        Returns the number of settings created.
        """
        created = 0
        for key, value, value_type, category, description in DEFAULT_SETTINGS:
            if self._repo.get_by_key(key) is not None:
                continue
            self._repo.save(
                Setting(
                    key=key,
                    value=value,
                    value_type=value_type,
                    category=category,
                    description=description,
                )
            )
            created += 1

        self._invalidate_after_write()
        logger.info("settings.defaults_initialized", created=created)
        return created


def get_store_settings_service() -> StoreSettingsService:
    from modules.store_settings.repositories.django_repository import (
        SettingDjangoRepository,
    )

    return StoreSettingsService(repository=SettingDjangoRepository())

