"""Django ORM implementation of the Category repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Count, Q

from modules.categories.models import Category
from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


class CategoryDjangoRepository(ICategoryRepository):
    def get_by_id(self, id: str) -> Optional[Category]:
        """Returns ``None`` for non-existent or invalid IDs."""
        try:
            return self.with_product_counts().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[Category]:
        return Category.objects.filter(name__iexact=name.strip()).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet:
        queryset = Category.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def with_product_counts(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> models.QuerySet:
        return self.list(filters).annotate(
            product_count=Count(
                "products", filter=Q(products__deleted_at__isnull=True)
            )
        )

    def count_products(self, id: str) -> int:
        from modules.products.models import Product

        return Product.objects.filter(category_id=id).count()

    @transaction.atomic
    def save(self, entity: Category) -> Category:
        entity.save()
        logger.info("category.saved", category_id=str(entity.id), slug=entity.slug)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Category.objects.filter(id=id).delete()
        return deleted > 0
