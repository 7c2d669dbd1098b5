"""Order, OrderItem, and OrderStatusHistory models.

- ``order_number`` is ``CS`` + ``yymmdd`` + a per-day sequence
  (``CS241019001``), generated on first save.
- Customer details are stored on the order itself; ``user`` is only set when
  a logged-in customer placed it.
- OrderItem snapshots product name, SKU, image and selling price so later
  catalog edits never rewrite past orders.
- ``coupon_code`` survives deletion of the coupon (``coupon`` is SET_NULL).
- Idempotency via ``idempotency_key`` unique constraint.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders.constants import (
    DEFAULT_COUNTRY,
    ORDER_NUMBER_MAX_RETRIES,
    ORDER_NUMBER_PREFIX,
    PAYMENT_TRANSITIONS,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
    OrderType,
    PaymentMethod,
    PaymentStatus,
)


def _money(**kwargs: Any) -> models.DecimalField:
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class Order(SoftDeleteModel):
    """Order aggregate root.

    ``idempotency_key`` is nullable: only API clients sending the
    ``Idempotency-Key`` header carry one.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    customer_name = models.CharField(max_length=100)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=20)
    address_street = models.CharField(max_length=255, blank=True, default="")
    address_city = models.CharField(max_length=100, blank=True, default="")
    address_state = models.CharField(max_length=100, blank=True, default="")
    address_zip_code = models.CharField(max_length=20, blank=True, default="")
    address_country = models.CharField(
        max_length=100, blank=True, default=DEFAULT_COUNTRY
    )

    subtotal = _money()
    discount_amount = _money()
    discount_type = models.CharField(max_length=10, blank=True, default="")
    coupon = models.ForeignKey(
        "coupons.Coupon",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    coupon_code = models.CharField(max_length=20, blank=True, default="")
    shipping_cost = _money()
    tax_amount = _money()
    total_amount = _money()

    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.UPI,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    order_type = models.CharField(
        max_length=10,
        choices=OrderType.choices,
        default=OrderType.ONLINE,
    )

    notes = models.TextField(blank=True, default="")
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True, default="")
    idempotency_key = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["payment_status"], name="orders_payment_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["customer_email"], name="orders_email_idx"),
        ]

    # ------------------------------------------------------------------
    # State machines
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def can_change_payment_to(self, new_status: str) -> bool:
        return new_status in PAYMENT_TRANSITIONS.get(self.payment_status, set())

    @property
    def items_count(self) -> int:
        return sum(item.quantity for item in self.items.all())

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number(offset: int = 0) -> str:
        """Next ``CSyymmddNNN`` for today; ``offset`` skips taken numbers."""
        prefix = f"{ORDER_NUMBER_PREFIX}{timezone.localdate():%y%m%d}"
        sequence = Order.objects.filter(order_number__startswith=prefix).count()
        return f"{prefix}{sequence + 1 + offset:03d}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for attempt in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number(offset=attempt)
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Order line. ``subtotal`` is always ``quantity * unit_price``."""

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=100)
    product_sku = models.CharField(max_length=64)
    image_url = models.URLField(max_length=500, blank=True, default="")
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.subtotal = self.quantity * self.unit_price
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity} (₹{self.subtotal})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``user`` is ``None`` when the change was made by an anonymous customer
    or by the system.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"
