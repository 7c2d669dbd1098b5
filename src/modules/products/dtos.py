"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``AdjustStockDTO``: input for the stock endpoint.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.products.constants import (
    MAX_TAGS,
    ProductStatus,
    ProductUnit,
    StockOperation,
)


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags are allowed.")
    return cleaned


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``sku`` and ``name`` are non-empty.
    - ``price`` is greater than zero.
    - ``discount_price``, when given, is positive and below ``price``.
    - ``stock_quantity`` is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    sku: str = Field(max_length=64)
    name: str = Field(max_length=100)
    category_id: UUID
    price: Decimal
    discount_price: Optional[Decimal] = None
    description: str = Field(default="", max_length=1000)
    stock_quantity: int = 0
    unit: ProductUnit = ProductUnit.PIECE
    weight: Optional[Decimal] = None
    status: ProductStatus = ProductStatus.ACTIVE
    is_featured: bool = False
    tags: List[str] = Field(default_factory=list)
    image_url: str = ""

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip().upper()

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Product name is required.")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)

    @model_validator(mode="after")
    def discount_below_price(self):
        if self.discount_price is not None:
            if self.discount_price <= 0 or self.discount_price >= self.price:
                raise ValueError("Discount price must be positive and less than price.")
        return self


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields are updated.
    ``clear_discount`` removes an existing discount price.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, max_length=100)
    category_id: Optional[UUID] = None
    price: Optional[Decimal] = None
    discount_price: Optional[Decimal] = None
    clear_discount: bool = False
    description: Optional[str] = Field(default=None, max_length=1000)
    stock_quantity: Optional[int] = None
    unit: Optional[ProductUnit] = None
    weight: Optional[Decimal] = None
    status: Optional[ProductStatus] = None
    is_featured: Optional[bool] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = None

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("discount_price")
    @classmethod
    def discount_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Discount price must be greater than zero.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v

    @field_validator("tags")
    @classmethod
    def normalise_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class AdjustStockDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int
    operation: StockOperation = StockOperation.SET

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Quantity cannot be negative.")
        return v
