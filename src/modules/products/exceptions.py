"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class ProductAlreadyExists(Exception):
    """A product with the same SKU already exists."""


class ProductNotFound(Exception):
    """The requested product does not exist or has been soft-deleted."""


class InvalidDiscountPrice(Exception):
    """``discount_price`` must be positive and below ``price``."""


class InsufficientStock(Exception):
    """A stock adjustment would take the quantity below zero."""
