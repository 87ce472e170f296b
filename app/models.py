"""
models.py
---------

Pydantic records held by the in‑memory store and the helpers that
shape them into the JSON payloads returned by the API.

Field names on the wire follow the public API (``_id``,
``productImage``, ``isOrderShipped`` ...) through aliases, while the
Python attributes use snake_case.  ``to_public`` dumps by alias so the
values placed in the response cache are plain JSON‑serialisable dicts.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id, alias="_id")

    def to_public(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Category(_Record):
    name: str
    image: Optional[str] = None


class Product(_Record):
    name: str
    product_image: str = Field("", alias="productImage")
    description: str = ""
    in_stock: bool = Field(True, alias="inStock")
    price: float
    rating: float = Field(0, ge=0, le=5)
    discount: Optional[float] = None
    category: str
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")


class CartLine(BaseModel):
    product: str
    quantity: int = 1


Role = Literal["user", "admin"]


class User(_Record):
    name: str
    email: str
    role: Role = "user"
    phone: Optional[str] = None
    cart: List[CartLine] = Field(default_factory=list)

    def profile(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "phone": self.phone,
        }


class ShippingAddress(BaseModel):
    address: str
    city: str
    postal_code: str = Field(alias="postalCode")
    country: str

    model_config = ConfigDict(populate_by_name=True)


class OrderItem(BaseModel):
    product: str
    quantity: int = 1


class Order(_Record):
    user: str
    order_items: List[OrderItem] = Field(alias="orderItems")
    shipping_address: ShippingAddress = Field(alias="shippingAddress")
    total_price: float = Field(0.0, alias="totalPrice")
    is_order_shipped: bool = Field(False, alias="isOrderShipped")
    is_out_for_delivery: bool = Field(False, alias="isOutForDelivery")
    is_delivered: bool = Field(False, alias="isDelivered")
    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")

    def status_steps(self) -> List[str]:
        """Derive the human readable status from the shipping flags."""
        status: List[str] = []
        if not self.is_order_shipped:
            status.append("Order Placed")
        if self.is_order_shipped and not self.is_out_for_delivery:
            status.append("Order Shipped")
        if self.is_out_for_delivery and not self.is_delivered:
            status.append("Out for Delivery")
        if self.is_delivered:
            status.append("Order Delivered")
        return status
