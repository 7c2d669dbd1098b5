"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from modules.orders.constants import DEFAULT_COUNTRY, PaymentMethod


class CustomerInfoDTO(BaseModel):
    """Who the order is for. Name, e-mail and phone are mandatory."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=100)
    email: EmailStr
    phone: str = Field(max_length=20)
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = DEFAULT_COUNTRY

    @field_validator("name", "phone")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Customer name, email, and phone are required.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class CreateOrderItemDTO(BaseModel):
    """``unit_price`` is resolved by the Service Layer from the catalog."""

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for checkout requests.

    Validates:
    - ``items`` must contain at least one item.
    - Each item quantity must be positive.
    - A product appears at most once.
    """

    model_config = ConfigDict(frozen=True)

    customer: CustomerInfoDTO
    items: List[CreateOrderItemDTO]
    coupon_code: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.UPI
    notes: str = ""
    idempotency_key: Optional[str] = Field(default=None, max_length=255)

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must contain at least one item.")
        return v

    @field_validator("coupon_code")
    @classmethod
    def normalise_coupon_code(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().upper() or None

    @model_validator(mode="after")
    def no_duplicate_products(self):
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self
