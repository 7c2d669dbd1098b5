"""Coupon service layer (Use Cases).

Admin management of coupons plus the two checkout entry points:

- ``quote``: read-only check used by the public validate endpoint.
- ``redeem``: row-locked check + usage increment, called inside the
  order transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

import structlog
from django.db import models, transaction

from modules.coupons.constants import MAX_PERCENTAGE, DiscountType
from modules.coupons.exceptions import (
    CouponAlreadyExists,
    CouponNotApplicable,
    CouponNotFound,
    InvalidCoupon,
)
from modules.coupons.models import Coupon
from modules.coupons.rules import CouponLine, calculate_discount, ensure_applicable

if TYPE_CHECKING:
    from modules.coupons.dtos import CreateCouponDTO, UpdateCouponDTO, ValidateCouponDTO
    from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)

_SCALAR_FIELDS = (
    "name",
    "description",
    "discount_type",
    "value",
    "minimum_order_amount",
    "maximum_discount_amount",
    "usage_limit",
    "user_usage_limit",
    "start_date",
    "end_date",
    "is_active",
)
_SCOPE_FIELDS = (
    "applicable_categories",
    "excluded_categories",
    "applicable_products",
    "excluded_products",
)
# Explicit null on update clears these
_NULLABLE_FIELDS = ("maximum_discount_amount", "usage_limit")


@dataclass(frozen=True)
class CouponQuote:
    coupon: Coupon
    discount: Decimal


class CouponService:
    def __init__(self, repository: ICouponRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Admin commands
    # ------------------------------------------------------------------

    def _ensure_scope_exists(self, scope: Dict[str, Optional[List]]) -> None:
        missing = self._repo.missing_scope_ids(**scope)
        if missing:
            raise InvalidCoupon(
                "Unknown category or product ids: "
                + ", ".join(str(pk) for pk in missing)
            )

    @transaction.atomic
    def create_coupon(self, dto: CreateCouponDTO, created_by=None) -> Coupon:
        """Create a coupon with its applicability sets.

        Raises:
            CouponAlreadyExists: the code is taken.
            InvalidCoupon: a scope list names an unknown category or product.
        """
        log = logger.bind(code=dto.code)

        if self._repo.get_by_code(dto.code):
            log.warning("coupon.duplicate_code")
            raise CouponAlreadyExists(f"Coupon code '{dto.code}' already exists.")

        scope = {field: getattr(dto, field) for field in _SCOPE_FIELDS}
        self._ensure_scope_exists(scope)

        coupon = Coupon(
            code=dto.code,
            created_by=created_by,
            **{field: getattr(dto, field) for field in _SCALAR_FIELDS},
        )
        coupon = self._repo.save(coupon)
        self._repo.set_scope(coupon, **scope)
        log.info("coupon.created", coupon_id=str(coupon.id))
        return self._repo.get_by_id(str(coupon.id))

    @transaction.atomic
    def update_coupon(self, id: str, dto: UpdateCouponDTO) -> Coupon:
        """Partial update of the fields present in ``dto``.

        An explicit ``None`` clears ``maximum_discount_amount`` or
        ``usage_limit``.

        Raises:
            CouponNotFound: the coupon does not exist.
            InvalidCoupon: the merged coupon breaks a range rule, or a scope
                list names an unknown category or product.
        """
        coupon = self._repo.get_by_id(id)
        if not coupon:
            raise CouponNotFound(f"Coupon {id} not found.")

        provided = dto.model_fields_set
        for field in _SCALAR_FIELDS:
            if field not in provided:
                continue
            value = getattr(dto, field)
            if value is None and field not in _NULLABLE_FIELDS:
                continue
            setattr(coupon, field, value)

        if coupon.discount_type == DiscountType.PERCENTAGE and coupon.value > MAX_PERCENTAGE:
            raise InvalidCoupon("Percentage discount cannot exceed 100.")
        if coupon.end_date <= coupon.start_date:
            raise InvalidCoupon("End date must be after start date.")

        scope = {
            field: getattr(dto, field) for field in _SCOPE_FIELDS if field in provided
        }
        self._ensure_scope_exists(scope)

        coupon = self._repo.save(coupon)
        self._repo.set_scope(coupon, **scope)
        logger.info("coupon.updated", coupon_id=str(id))
        return self._repo.get_by_id(str(coupon.id))

    @transaction.atomic
    def delete_coupon(self, id: str) -> None:
        """Orders keep their ``coupon_code`` snapshot after deletion."""
        if not self._repo.get_by_id(id):
            raise CouponNotFound(f"Coupon {id} not found.")
        self._repo.delete(id)
        logger.info("coupon.deleted", coupon_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_coupon(self, id: str) -> Coupon:
        coupon = self._repo.get_by_id(id)
        if not coupon:
            raise CouponNotFound(f"Coupon {id} not found.")
        return coupon

    def list_coupons(self) -> models.QuerySet:
        return self._repo.list()

    def get_stats(self) -> Dict[str, int]:
        return self._repo.stats()

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def _check(
        self,
        coupon: Coupon,
        subtotal: Decimal,
        lines: Iterable[CouponLine],
        customer_email: Optional[str],
    ) -> Decimal:
        customer_uses = (
            self._repo.count_customer_uses(coupon.id, customer_email)
            if customer_email
            else 0
        )
        ensure_applicable(
            coupon,
            coupon.scope(),
            subtotal,
            lines,
            customer_uses=customer_uses,
        )
        return calculate_discount(
            coupon.discount_type,
            coupon.value,
            subtotal,
            coupon.maximum_discount_amount,
        )

    def quote(self, dto: ValidateCouponDTO) -> CouponQuote:
        """Check a code against an order amount without redeeming it.

        Raises:
            CouponNotFound: unknown code.
            CouponNotApplicable: (subclasses) the coupon cannot be used.
        """
        coupon = self._repo.get_by_code(dto.code)
        if not coupon:
            raise CouponNotFound(f"Coupon '{dto.code}' not found.")

        lines = _lines_for_products([item.product_id for item in dto.items])
        discount = self._check(coupon, dto.order_amount, lines, dto.customer_email)
        logger.info(
            "coupon.quoted",
            code=coupon.code,
            order_amount=str(dto.order_amount),
            discount=str(discount),
        )
        return CouponQuote(coupon=coupon, discount=discount)

    def redeem(
        self,
        code: str,
        subtotal: Decimal,
        lines: List[CouponLine],
        customer_email: Optional[str] = None,
    ) -> CouponQuote:
        """Lock, check and consume one use of the coupon.

        Must run inside the caller's transaction so a later failure
        releases the use again.

        Raises:
            CouponNotFound: unknown code.
            CouponNotApplicable: (subclasses) the coupon cannot be used.
        """
        coupon = self._repo.get_by_code(code, for_update=True)
        if not coupon:
            raise CouponNotFound(f"Coupon '{code.strip().upper()}' not found.")

        log = logger.bind(code=coupon.code, subtotal=str(subtotal))
        try:
            discount = self._check(coupon, subtotal, lines, customer_email)
        except CouponNotApplicable as exc:
            log.warning("coupon.rejected", reason=type(exc).__name__)
            raise

        self._repo.increment_usage(coupon)
        log.info("coupon.applied", discount=str(discount), used_count=coupon.used_count)
        return CouponQuote(coupon=coupon, discount=discount)

    def release(self, coupon_id) -> None:
        """Give back one use after an order is cancelled."""
        self._repo.release_usage(coupon_id)
        logger.info("coupon.released", coupon_id=str(coupon_id))


def _lines_for_products(product_ids: List) -> List[CouponLine]:
    if not product_ids:
        return []
    from modules.products.models import Product

    return [
        CouponLine(product_id=pid, category_id=cid)
        for pid, cid in Product.objects.alive()
        .filter(id__in=product_ids)
        .values_list("id", "category_id")
    ]
