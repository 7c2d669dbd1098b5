"""Category repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.categories.models import Category


class ICategoryRepository(IRepository["Category"]):
    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive look-up by name."""

    @abstractmethod
    def with_product_counts(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Category]":
        """Categories annotated with ``product_count`` (live products only)."""

    @abstractmethod
    def count_products(self, id: str) -> int:
        """Number of products in the category, soft-deleted ones included.

        Soft-deleted products stay referenced by past orders, so they still
        pin the category.
        """
