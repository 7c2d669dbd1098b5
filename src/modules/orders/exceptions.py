"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderNotFound(Exception):
    """The requested order does not exist or has been soft-deleted."""


class InvalidOrderStatus(Exception):
    """The status transition is not allowed by the order state machine."""


class InvalidPaymentStatus(Exception):
    """The payment status transition is not allowed."""


class InsufficientStock(Exception):
    """Not enough stock to fulfil an order line."""


class ProductNotFound(Exception):
    """A product referenced by an order item does not exist."""


class InactiveProduct(Exception):
    """A product referenced by an order item is not for sale."""
