"""Category service layer (Use Cases)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.db import models, transaction

from modules.categories.exceptions import (
    CategoryAlreadyExists,
    CategoryInUse,
    CategoryNotFound,
)
from modules.categories.models import Category

if TYPE_CHECKING:
    from modules.categories.dtos import CreateCategoryDTO, UpdateCategoryDTO
    from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


class CategoryService:
    """Application service for Category use-cases."""

    def __init__(self, repository: ICategoryRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_category(self, dto: CreateCategoryDTO) -> Category:
        """Raises ``CategoryAlreadyExists`` when the name is taken."""
        log = logger.bind(name=dto.name)

        if self._repo.get_by_name(dto.name):
            log.warning("category.duplicate_name")
            raise CategoryAlreadyExists(f"Category '{dto.name}' already exists.")

        category = self._repo.save(
            Category(
                name=dto.name,
                description=dto.description,
                image_url=dto.image_url,
                is_active=dto.is_active,
                sort_order=dto.sort_order,
            )
        )
        log.info("category.created", category_id=str(category.id), slug=category.slug)
        return category

    @transaction.atomic
    def update_category(self, id: str, dto: UpdateCategoryDTO) -> Category:
        """Partial update. Renaming regenerates the slug.

        Raises:
            CategoryNotFound: the category does not exist.
            CategoryAlreadyExists: the new name belongs to another category.
        """
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")

        log = logger.bind(category_id=str(id))

        if dto.name is not None and dto.name != category.name:
            clash = self._repo.get_by_name(dto.name)
            if clash and clash.pk != category.pk:
                log.warning("category.duplicate_name", name=dto.name)
                raise CategoryAlreadyExists(f"Category '{dto.name}' already exists.")
            category.name = dto.name
            category.slug = ""

        for field in ("description", "image_url", "is_active", "sort_order"):
            value = getattr(dto, field)
            if value is not None:
                setattr(category, field, value)

        category = self._repo.save(category)
        log.info("category.updated")
        return category

    @transaction.atomic
    def delete_category(self, id: str) -> None:
        """Raises ``CategoryNotFound`` or ``CategoryInUse``."""
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")

        product_count = self._repo.count_products(id)
        if product_count:
            logger.warning(
                "category.delete_refused",
                category_id=str(id),
                product_count=product_count,
            )
            raise CategoryInUse(
                f"Category '{category.name}' still has {product_count} product(s)."
            )

        self._repo.delete(id)
        logger.info("category.deleted", category_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_categories(self, include_inactive: bool = False) -> models.QuerySet:
        filters = None if include_inactive else {"is_active": True}
        return self._repo.with_product_counts(filters)

    def get_category(self, id: str, include_inactive: bool = False) -> Category:
        category = self._repo.get_by_id(id)
        if not category or (not include_inactive and not category.is_active):
            raise CategoryNotFound(f"Category {id} not found.")
        return category
