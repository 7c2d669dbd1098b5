"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- SKU must be unique.
- The product must belong to an existing category.
- ``discount_price`` stays below ``price`` after partial updates.
- Stock adjustments never go below zero.
- Soft delete via repository.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

import structlog
from django.db import models, transaction

from modules.categories.exceptions import CategoryNotFound
from modules.categories.models import Category
from modules.products.constants import ProductStatus, StockOperation
from modules.products.exceptions import (
    InsufficientStock,
    InvalidDiscountPrice,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import (
        AdjustStockDTO,
        CreateProductDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

_UPDATABLE_FIELDS = (
    "name",
    "price",
    "discount_price",
    "description",
    "stock_quantity",
    "unit",
    "weight",
    "status",
    "is_featured",
    "tags",
    "image_url",
)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def _get_category(self, category_id) -> Category:
        category = Category.objects.filter(id=category_id).first()
        if not category:
            raise CategoryNotFound(f"Category {category_id} not found.")
        return category

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing uniqueness rules.

        Raises:
            ProductAlreadyExists: if SKU is already taken.
            CategoryNotFound: if the category does not exist.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.get_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        category = self._get_category(dto.category_id)

        product = Product(
            sku=dto.sku,
            name=dto.name,
            category=category,
            price=dto.price,
            discount_price=dto.discount_price,
            description=dto.description,
            stock_quantity=dto.stock_quantity,
            unit=dto.unit,
            weight=dto.weight,
            status=dto.status,
            is_featured=dto.is_featured,
            tags=dto.tags,
            image_url=dto.image_url,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
            CategoryNotFound: if a new category does not exist.
            InvalidDiscountPrice: if the resulting discount is not below price.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(product_id=str(id))

        if dto.category_id is not None:
            product.category = self._get_category(dto.category_id)

        for field in _UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
        if dto.clear_discount:
            product.discount_price = None

        if product.discount_price is not None and product.discount_price >= product.price:
            log.warning(
                "product.invalid_discount",
                price=str(product.price),
                discount_price=str(product.discount_price),
            )
            raise InvalidDiscountPrice("Discount price must be less than price.")

        product = self._repo.save(product)
        log.info("product.updated")
        return product

    @transaction.atomic
    def adjust_stock(self, id: str, dto: AdjustStockDTO) -> Product:
        """Add, subtract or set stock under a row lock.

        Raises:
            ProductNotFound: if the product does not exist.
            InsufficientStock: if subtracting would go below zero.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        log = logger.bind(
            product_id=str(id),
            operation=dto.operation,
            quantity=dto.quantity,
            previous=product.stock_quantity,
        )

        if dto.operation == StockOperation.ADD:
            product.stock_quantity += dto.quantity
        elif dto.operation == StockOperation.SUBTRACT:
            if dto.quantity > product.stock_quantity:
                log.warning("product.stock_adjust_rejected")
                raise InsufficientStock(
                    f"Product {product.sku}: cannot subtract {dto.quantity}, "
                    f"available {product.stock_quantity}."
                )
            product.stock_quantity -= dto.quantity
        else:
            product.stock_quantity = dto.quantity

        product.save(update_fields=["stock_quantity"])
        log.info("product.stock_adjusted", current=product.stock_quantity)
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        self._repo.delete(id)
        logger.info("product.soft_deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, include_inactive: bool = False) -> models.QuerySet:
        if include_inactive:
            return self._repo.list()
        return self._repo.list({"status": ProductStatus.ACTIVE})

    def get_product(self, id: str, include_inactive: bool = False) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: missing, soft-deleted, or inactive while
                ``include_inactive`` is false.
        """
        product = self._repo.get_by_id(id)
        if not product or (not include_inactive and not product.is_active):
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def record_view(self, product: Product) -> Product:
        self._repo.increment_views(str(product.id))
        product.views += 1
        return product

    def get_stats(self) -> Dict[str, int]:
        return self._repo.stats()
