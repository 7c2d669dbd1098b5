"""Django ORM implementation of the Coupon repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from modules.coupons.models import Coupon
from modules.coupons.repositories.interfaces import ICouponRepository

logger = structlog.get_logger(__name__)

SCOPE_FIELDS = (
    "applicable_categories",
    "excluded_categories",
    "applicable_products",
    "excluded_products",
)


class CouponDjangoRepository(ICouponRepository):
    def get_by_id(self, id: str) -> Optional[Coupon]:
        try:
            return Coupon.objects.prefetch_related(*SCOPE_FIELDS).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, code: str, for_update: bool = False) -> Optional[Coupon]:
        queryset = Coupon.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.filter(code=code.strip().upper()).first()

    def get_for_update(self, id: str) -> Optional[Coupon]:
        try:
            return Coupon.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Coupon.objects.prefetch_related(*SCOPE_FIELDS)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Coupon) -> Coupon:
        entity.save()
        logger.info("coupon.saved", coupon_id=str(entity.id), code=entity.code)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Coupon.objects.filter(id=id).delete()
        return deleted > 0

    def set_scope(self, coupon: Coupon, **scope) -> None:
        for field in SCOPE_FIELDS:
            ids = scope.get(field)
            if ids is not None:
                getattr(coupon, field).set(ids)

    def missing_scope_ids(self, **scope) -> List:
        from modules.categories.models import Category
        from modules.products.models import Product

        missing = []
        for model, fields in (
            (Category, ("applicable_categories", "excluded_categories")),
            (Product, ("applicable_products", "excluded_products")),
        ):
            wanted = {pk for field in fields for pk in scope.get(field) or ()}
            if not wanted:
                continue
            found = set(model.objects.filter(id__in=wanted).values_list("id", flat=True))
            missing.extend(sorted(wanted - found, key=str))
        return missing

    def count_customer_uses(self, coupon_id, customer_email: str) -> int:
        from modules.orders.constants import OrderStatus
        from modules.orders.models import Order

        return (
            Order.objects.alive()
            .filter(coupon_id=coupon_id, customer_email__iexact=customer_email)
            .exclude(status=OrderStatus.CANCELLED)
            .count()
        )

    def increment_usage(self, coupon: Coupon) -> None:
        Coupon.objects.filter(pk=coupon.pk).update(used_count=F("used_count") + 1)
        coupon.used_count += 1

    def release_usage(self, coupon_id) -> None:
        Coupon.objects.filter(pk=coupon_id, used_count__gt=0).update(
            used_count=F("used_count") - 1
        )

    def stats(self) -> Dict[str, int]:
        now = timezone.now()
        return Coupon.objects.aggregate(
            total=Count("id"),
            active=Count(
                "id",
                filter=Q(is_active=True, start_date__lte=now, end_date__gte=now)
                & (Q(usage_limit__isnull=True) | Q(used_count__lt=F("usage_limit"))),
            ),
            expired=Count("id", filter=Q(end_date__lt=now)),
            exhausted=Count(
                "id",
                filter=Q(usage_limit__isnull=False, used_count__gte=F("usage_limit")),
            ),
        )
