"""Coupon applicability and discount rules.

Pure functions over a coupon's scalar fields and a ``CouponScope`` so they
can be exercised without the database.  A coupon applies to an order when:

1. it is active, inside its date window and below ``usage_limit``;
2. the subtotal reaches ``minimum_order_amount``;
3. if any applicable set is non-empty, at least one line matches it
   (product in ``applicable_products`` or category in
   ``applicable_categories``);
4. no line hits ``excluded_products`` / ``excluded_categories``;
5. the customer has used it fewer than ``user_usage_limit`` times.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional
from uuid import UUID

from django.utils import timezone

from modules.core.money import ZERO, quantize_money
from modules.coupons.constants import DiscountType
from modules.coupons.exceptions import (
    CouponExpired,
    CouponInactive,
    CouponNotApplicableToItems,
    CouponNotStarted,
    CouponUsageLimitReached,
    CustomerUsageLimitReached,
    MinimumOrderNotMet,
)

if TYPE_CHECKING:
    from modules.coupons.models import Coupon


@dataclass(frozen=True)
class CouponLine:
    """The parts of an order line the coupon scope looks at."""

    product_id: UUID
    category_id: UUID


@dataclass(frozen=True)
class CouponScope:
    applicable_products: FrozenSet[UUID] = field(default_factory=frozenset)
    applicable_categories: FrozenSet[UUID] = field(default_factory=frozenset)
    excluded_products: FrozenSet[UUID] = field(default_factory=frozenset)
    excluded_categories: FrozenSet[UUID] = field(default_factory=frozenset)

    @property
    def is_restricted(self) -> bool:
        return bool(self.applicable_products or self.applicable_categories)

    def matches(self, line: CouponLine) -> bool:
        return (
            line.product_id in self.applicable_products
            or line.category_id in self.applicable_categories
        )

    def excludes(self, line: CouponLine) -> bool:
        return (
            line.product_id in self.excluded_products
            or line.category_id in self.excluded_categories
        )


def calculate_discount(
    discount_type: str,
    value: Decimal,
    subtotal: Decimal,
    maximum_discount_amount: Optional[Decimal] = None,
) -> Decimal:
    """Discount on ``subtotal``; never more than the subtotal itself."""
    if subtotal <= 0:
        return ZERO
    if discount_type == DiscountType.PERCENTAGE:
        discount = subtotal * value / Decimal("100")
        if maximum_discount_amount is not None:
            discount = min(discount, maximum_discount_amount)
    else:
        discount = min(value, subtotal)
    return quantize_money(discount)


def ensure_valid(coupon: Coupon, now: Optional[datetime] = None) -> None:
    now = now or timezone.now()
    if not coupon.is_active:
        raise CouponInactive(f"Coupon {coupon.code} is not active.")
    if not coupon.has_started(now):
        raise CouponNotStarted(f"Coupon {coupon.code} is not valid yet.")
    if coupon.is_expired(now):
        raise CouponExpired(f"Coupon {coupon.code} has expired.")
    if coupon.is_exhausted:
        raise CouponUsageLimitReached(
            f"Coupon {coupon.code} has reached its usage limit."
        )


def ensure_applicable(
    coupon: Coupon,
    scope: CouponScope,
    subtotal: Decimal,
    lines: Iterable[CouponLine] = (),
    customer_uses: int = 0,
    now: Optional[datetime] = None,
) -> None:
    """Raise a ``CouponNotApplicable`` subclass unless the coupon applies.

    ``lines`` may be empty when only the order amount is known (the public
    validate endpoint without items); item rules are skipped then.
    """
    ensure_valid(coupon, now)

    if subtotal < coupon.minimum_order_amount:
        raise MinimumOrderNotMet(
            f"Minimum order amount for {coupon.code} is "
            f"{coupon.minimum_order_amount}."
        )

    lines = list(lines)
    if lines:
        if scope.is_restricted and not any(scope.matches(line) for line in lines):
            raise CouponNotApplicableToItems(
                f"Coupon {coupon.code} does not apply to any item in this order."
            )
        if any(scope.excludes(line) for line in lines):
            raise CouponNotApplicableToItems(
                f"Coupon {coupon.code} cannot be used with some items in this order."
            )

    if customer_uses >= coupon.user_usage_limit:
        raise CustomerUsageLimitReached(
            f"Coupon {coupon.code} was already used by this customer."
        )
