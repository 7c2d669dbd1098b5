"""Key/value store for business configuration.

Values are persisted as text and converted according to ``value_type``:

- ``number``  -> ``Decimal``
- ``boolean`` -> ``bool`` (``"true"`` / ``"1"``)
- ``object`` / ``array`` -> JSON
- ``string``  -> unchanged
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db import models

from modules.core.models import BaseModel
from modules.store_settings.constants import SettingCategory, SettingType
from modules.store_settings.exceptions import InvalidSettingValue


def parse_value(raw: str, value_type: str) -> Any:
    """Convert a stored text value to its Python representation."""
    if value_type == SettingType.NUMBER:
        try:
            number = Decimal(raw)
        except (InvalidOperation, TypeError):
            return Decimal("0")
        return number if number.is_finite() else Decimal("0")
    if value_type == SettingType.BOOLEAN:
        return str(raw).strip().lower() in ("true", "1")
    if value_type in (SettingType.OBJECT, SettingType.ARRAY):
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            return {} if value_type == SettingType.OBJECT else []
    return raw


def stringify_value(value: Any, value_type: str) -> str:
    """Convert a Python value to its stored text form.

    Raises:
        InvalidSettingValue: the value does not fit ``value_type``.
    """
    if value_type == SettingType.NUMBER:
        if isinstance(value, bool):
            raise InvalidSettingValue(f"{value!r} is not a number.")
        try:
            number = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidSettingValue(f"{value!r} is not a number.") from exc
        if not number.is_finite():
            raise InvalidSettingValue(f"{value!r} is not a finite number.")
        return str(number)
    if value_type == SettingType.BOOLEAN:
        if isinstance(value, str):
            return "true" if value.strip().lower() in ("true", "1") else "false"
        return "true" if value else "false"
    if value_type == SettingType.OBJECT:
        if not isinstance(value, dict):
            raise InvalidSettingValue("Expected a JSON object.")
        return json.dumps(value)
    if value_type == SettingType.ARRAY:
        if not isinstance(value, list):
            raise InvalidSettingValue("Expected a JSON array.")
        return json.dumps(value)
    return "" if value is None else str(value)


class Setting(BaseModel):
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default="")
    value_type = models.CharField(
        max_length=10,
        choices=SettingType.choices,
        default=SettingType.STRING,
    )
    description = models.CharField(max_length=255, blank=True, default="")
    category = models.CharField(
        max_length=20,
        choices=SettingCategory.choices,
        default=SettingCategory.GENERAL,
    )

    class Meta:
        db_table = "settings"
        ordering = ["category", "key"]
        indexes = [
            models.Index(fields=["category"], name="settings_category_idx"),
        ]

    @property
    def typed_value(self) -> Any:
        return parse_value(self.value, self.value_type)

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
