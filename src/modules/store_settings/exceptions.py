"""Store settings domain exceptions."""

from __future__ import annotations


class SettingNotFound(Exception):
    """No setting is stored under the requested key."""


class InvalidSettingValue(Exception):
    """The value cannot be represented with the setting's type."""
