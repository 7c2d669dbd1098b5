"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest

from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from modules.products.models import Product

logger = structlog.get_logger(__name__)


def _with_relations(queryset: models.QuerySet) -> models.QuerySet:
    return queryset.select_related("user", "coupon").prefetch_related(
        "items", "status_history"
    )


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        data = dict(data)
        items = data.pop("items", [])

        order = Order(**data)
        order.save()

        for item_data in items:
            product = item_data["product"]
            OrderItem(
                order=order,
                product=product,
                product_name=product.name,
                product_sku=product.sku,
                image_url=product.image_url,
                unit_price=item_data["unit_price"],
                quantity=item_data["quantity"],
            ).save()

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve a live order with items and history prefetched.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return _with_relations(Order.objects.alive()).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = _with_relations(Order.objects.alive())
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: str) -> Optional[Order]:
        try:
            return Order.objects.select_for_update().alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        return _with_relations(Order.objects.all()).filter(idempotency_key=key).first()

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete an order by ID."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.soft_deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Order-specific writes
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user=None,
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user=user if user is not None and user.is_authenticated else None,
        )
        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history

    def restock(self, item: OrderItem) -> None:
        Product.objects.filter(id=item.product_id).update(
            stock_quantity=F("stock_quantity") + item.quantity,
            sales=Greatest(F("sales") - item.quantity, Value(0)),
        )
