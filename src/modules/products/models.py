"""Product model with SKU uniqueness and stock control.

Business rules:
- SKU is unique and normalised to uppercase.
- Price must be greater than zero; an optional ``discount_price`` must be
  positive and strictly below ``price``.
- Stock quantity cannot be negative.
- Inactive products are hidden from the storefront and cannot be sold.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel
from modules.products.constants import (
    LOW_STOCK_THRESHOLD,
    ProductStatus,
    ProductUnit,
    StockStatus,
)

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    """Catalog item.

    ``views`` and ``sales`` are counters maintained with ``F()`` updates
    (storefront retrieve and checkout respectively).
    """

    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=1000, blank=True, default="")
    category = models.ForeignKey(
        "categories.Category",
        on_delete=models.PROTECT,
        related_name="products",
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    discount_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    stock_quantity = models.PositiveIntegerField(default=0)
    unit = models.CharField(
        max_length=10,
        choices=ProductUnit.choices,
        default=ProductUnit.PIECE,
    )
    weight = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE,
    )
    is_featured = models.BooleanField(default=False)
    tags = models.JSONField(default=list, blank=True)
    image_url = models.URLField(max_length=500, blank=True, default="")
    views = models.PositiveIntegerField(default=0)
    sales = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["status"], name="products_status_idx"),
            models.Index(fields=["category", "status"], name="products_category_idx"),
            models.Index(fields=["is_featured"], name="products_featured_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_price__isnull=True)
                | (
                    models.Q(discount_price__gt=0)
                    & models.Q(discount_price__lt=models.F("price"))
                ),
                name="products_discount_below_price",
            ),
        ]

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def selling_price(self) -> Decimal:
        """Price charged at checkout: the discount price when set."""
        if self.discount_price:
            return self.discount_price
        return self.price

    @property
    def discount_percentage(self) -> int:
        if not self.discount_price or not self.price:
            return 0
        pct = (self.price - self.discount_price) / self.price * 100
        return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def stock_status(self) -> str:
        if self.stock_quantity <= 0:
            return StockStatus.OUT_OF_STOCK
        if self.stock_quantity <= LOW_STOCK_THRESHOLD:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE and not self.is_deleted

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.sku.strip().upper()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        if self.discount_price is not None and self.price is not None:
            if self.discount_price >= self.price:
                raise ValidationError(
                    {"discount_price": "Discount price must be less than price."}
                )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                sku=self.sku,
                category_id=str(self.category_id),
            )

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
