"""Discount coupon.

A coupon is *valid* while it is active, inside its ``start_date`` /
``end_date`` window and below ``usage_limit``.  Whether it *applies* to a
particular order is decided by ``modules.coupons.rules``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.coupons.constants import (
    CODE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    DiscountType,
)
from modules.coupons.rules import CouponScope


class Coupon(BaseModel):
    code = models.CharField(max_length=CODE_MAX_LENGTH, unique=True)
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    description = models.CharField(
        max_length=DESCRIPTION_MAX_LENGTH, blank=True, default=""
    )
    discount_type = models.CharField(
        max_length=10,
        choices=DiscountType.choices,
        default=DiscountType.PERCENTAGE,
    )
    value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    minimum_order_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    maximum_discount_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)
    user_usage_limit = models.PositiveIntegerField(default=1)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    applicable_categories = models.ManyToManyField(
        "categories.Category", blank=True, related_name="applicable_coupons"
    )
    excluded_categories = models.ManyToManyField(
        "categories.Category", blank=True, related_name="excluded_coupons"
    )
    applicable_products = models.ManyToManyField(
        "products.Product", blank=True, related_name="applicable_coupons"
    )
    excluded_products = models.ManyToManyField(
        "products.Product", blank=True, related_name="excluded_coupons"
    )

    class Meta:
        db_table = "coupons"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "end_date"], name="coupons_active_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="coupons_end_after_start",
            ),
            models.CheckConstraint(
                condition=models.Q(discount_type=DiscountType.FIXED)
                | models.Q(value__lte=100),
                name="coupons_percentage_max_100",
            ),
        ]

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def is_expired(self, now=None) -> bool:
        return (now or timezone.now()) > self.end_date

    def has_started(self, now=None) -> bool:
        return (now or timezone.now()) >= self.start_date

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit

    @property
    def is_valid(self) -> bool:
        now = timezone.now()
        return (
            self.is_active
            and self.has_started(now)
            and not self.is_expired(now)
            and not self.is_exhausted
        )

    @property
    def remaining_usage(self) -> Optional[int]:
        if self.usage_limit is None:
            return None
        return max(self.usage_limit - self.used_count, 0)

    def scope(self) -> CouponScope:
        """Applicability sets, read once per check."""
        return CouponScope(
            applicable_products=frozenset(
                self.applicable_products.values_list("id", flat=True)
            ),
            applicable_categories=frozenset(
                self.applicable_categories.values_list("id", flat=True)
            ),
            excluded_products=frozenset(
                self.excluded_products.values_list("id", flat=True)
            ),
            excluded_categories=frozenset(
                self.excluded_categories.values_list("id", flat=True)
            ),
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.code:
            self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.code} ({self.discount_type} {self.value})"
