"""Category DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateCategoryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=50)
    description: str = Field(default="", max_length=200)
    image_url: str = ""
    is_active: bool = True
    sort_order: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Category name is required.")
        return v.strip()


class UpdateCategoryDTO(BaseModel):
    """Partial update: ``None`` leaves the field untouched."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=200)
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Category name cannot be blank.")
        return v.strip() if v else v
