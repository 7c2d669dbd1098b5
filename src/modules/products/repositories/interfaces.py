"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups needed for unique
SKUs, row-locked stock changes and the storefront counters.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List live products with optional filters."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a product by SKU, soft-deleted rows included."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a live product with a row-level lock (SELECT FOR UPDATE).

        Used for stock adjustments and by the checkout.
        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def increment_views(self, id: str) -> None:
        """Atomically add one to the product's view counter."""

    @abstractmethod
    def stats(self) -> Dict[str, int]:
        """Catalog counters for the admin dashboard."""
