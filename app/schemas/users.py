"""
schemas/users.py
-----------------

Request bodies for the profile and cart endpoints.

``name`` and ``email`` are optional at the schema level so that a
missing value reaches :func:`app.services.user_service.update_profile`,
which rejects it with a 400 like every other missing required value.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[Literal["user", "admin"]] = None

    @field_validator("name", "email")
    @classmethod
    def blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class AddToCartRequest(BaseModel):
    productId: str
    quantity: int = Field(default=1)

    @field_validator("quantity")
    @classmethod
    def positive_quantity(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("quantity must be greater than zero")
        return v
