"""Coupon DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
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

from modules.coupons.constants import (
    CODE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    MAX_PERCENTAGE,
    NAME_MAX_LENGTH,
    DiscountType,
)


class CouponScopeDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    applicable_categories: List[UUID] = Field(default_factory=list)
    excluded_categories: List[UUID] = Field(default_factory=list)
    applicable_products: List[UUID] = Field(default_factory=list)
    excluded_products: List[UUID] = Field(default_factory=list)


class CreateCouponDTO(CouponScopeDTO):
    """Validates:

    - ``code`` is non-empty, at most 20 chars, stored uppercase.
    - percentage coupons do not exceed 100.
    - ``end_date`` is after ``start_date``.
    - usage limits, when given, are at least 1.
    """

    code: str = Field(max_length=CODE_MAX_LENGTH)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    discount_type: DiscountType
    value: Decimal = Field(ge=0)
    minimum_order_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    maximum_discount_amount: Optional[Decimal] = Field(default=None, gt=0)
    usage_limit: Optional[int] = Field(default=None, ge=1)
    user_usage_limit: int = Field(default=1, ge=1)
    start_date: datetime
    end_date: datetime
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalise_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("Coupon code is required.")
        return v

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Coupon name is required.")
        return v.strip()

    @model_validator(mode="after")
    def check_ranges(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.value > MAX_PERCENTAGE:
            raise ValueError("Percentage discount cannot exceed 100.")
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date.")
        return self


class UpdateCouponDTO(BaseModel):
    """Partial update; the service re-checks ranges on the merged coupon.

    Scope lists replace the stored set when supplied.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    discount_type: Optional[DiscountType] = None
    value: Optional[Decimal] = Field(default=None, ge=0)
    minimum_order_amount: Optional[Decimal] = Field(default=None, ge=0)
    maximum_discount_amount: Optional[Decimal] = Field(default=None, gt=0)
    usage_limit: Optional[int] = Field(default=None, ge=1)
    user_usage_limit: Optional[int] = Field(default=None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    applicable_categories: Optional[List[UUID]] = None
    excluded_categories: Optional[List[UUID]] = None
    applicable_products: Optional[List[UUID]] = None
    excluded_products: Optional[List[UUID]] = None


class ValidateCouponItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int = Field(default=1, ge=1)


class ValidateCouponDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    order_amount: Decimal = Field(ge=0)
    items: List[ValidateCouponItemDTO] = Field(default_factory=list)
    customer_email: Optional[EmailStr] = None

    @field_validator("code")
    @classmethod
    def normalise_code(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("customer_email", mode="before")
    @classmethod
    def normalise_email(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v
