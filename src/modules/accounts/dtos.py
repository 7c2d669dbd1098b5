"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterUserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(max_length=150)
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalise_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v
