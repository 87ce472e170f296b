"""
services/order_service.py
-------------------------

Order creation and the per‑user order history.  Orders are not cached:
the history is read straight from the store so a freshly created order
is visible on the next request.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from fastapi import HTTPException

from app.db.store import Store
from app.logging_config import logger
from app.models import Order, OrderItem, ShippingAddress
from app.schemas.orders import CreateOrderRequest


def create_order(store: Store, user_id: str, data: CreateOrderRequest) -> Dict[str, Any]:
    """Validate every referenced product and persist the order.

    :raises HTTPException: 404 for the first unknown product or user
    """
    if store.get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    known = store.get_products([item.product for item in data.orderItems])
    for item in data.orderItems:
        if item.product not in known:
            raise HTTPException(status_code=404, detail=f"Product with ID {item.product} not found")

    order = store.add_order(Order(
        user=user_id,
        order_items=[OrderItem(product=i.product, quantity=i.quantity) for i in data.orderItems],
        shipping_address=ShippingAddress.model_validate(data.shippingAddress.model_dump()),
        total_price=data.totalPrice,
    ))
    logger.info(json.dumps({
        "event": "order_created",
        "user": user_id,
        "order": order.id,
        "items": len(order.order_items),
    }))
    return {"message": "Order created successfully", "_id": order.id}


def list_orders(store: Store, user_id: str) -> List[Dict[str, Any]]:
    """The caller's orders with their products expanded and a status list."""
    orders = store.orders_for_user(user_id)
    user = store.get_user(user_id)
    product_ids = {item.product for order in orders for item in order.order_items}
    products = store.get_products(sorted(product_ids))

    result: List[Dict[str, Any]] = []
    for order in orders:
        body = order.to_public()
        body["user"] = (
            {"_id": user.id, "name": user.name, "email": user.email, "phone": user.phone}
            if user else user_id
        )
        for item in body["orderItems"]:
            product = products.get(item["product"])
            if product is not None:
                item["product"] = {
                    "_id": product.id,
                    "name": product.name,
                    "price": product.price,
                    "productImage": product.product_image,
                }
        body["status"] = order.status_steps()
        result.append(body)
    return result
