"""Category domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) translates them into HTTP responses.
"""

from __future__ import annotations


class CategoryNotFound(Exception):
    """The requested category does not exist."""


class CategoryAlreadyExists(Exception):
    """Another category already uses this name."""


class CategoryInUse(Exception):
    """The category still has products and cannot be deleted."""
