"""Django ORM implementation of the Product repository.

Methods return ``None`` instead of raising for missing rows; the Service
Layer decides how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Count, F, Q

from modules.products.constants import LOW_STOCK_THRESHOLD, ProductStatus
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, soft-deleted or invalid IDs.
        """
        try:
            return (
                Product.objects.alive().select_related("category").filter(id=id).first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "active"}
            {"category__slug": "sparklers"}
        """
        queryset = Product.objects.alive().select_related("category")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            sku=entity.sku,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a product by ID."""
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=str(id))
        return True

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return Product.objects.filter(sku=sku.strip().upper()).first()

    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def increment_views(self, id: str) -> None:
        Product.objects.filter(id=id).update(views=F("views") + 1)

    def stats(self) -> Dict[str, int]:
        return Product.objects.alive().aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(status=ProductStatus.ACTIVE)),
            inactive=Count("id", filter=Q(status=ProductStatus.INACTIVE)),
            featured=Count("id", filter=Q(is_featured=True)),
            low_stock=Count(
                "id",
                filter=Q(stock_quantity__gt=0, stock_quantity__lte=LOW_STOCK_THRESHOLD),
            ),
            out_of_stock=Count("id", filter=Q(stock_quantity=0)),
        )
