"""
schemas/orders.py
------------------

Request body for order creation.  Field names follow the public API.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator


class OrderItemIn(BaseModel):
    product: str
    quantity: int = 1


class ShippingAddressIn(BaseModel):
    address: str
    city: str
    postalCode: str
    country: str


class CreateOrderRequest(BaseModel):
    orderItems: List[OrderItemIn]
    shippingAddress: ShippingAddressIn
    totalPrice: float = Field(default=0.0, ge=0)

    @field_validator("orderItems")
    @classmethod
    def not_empty(cls, v: List[OrderItemIn]) -> List[OrderItemIn]:
        if not v:
            raise ValueError("orderItems cannot be empty")
        return v
