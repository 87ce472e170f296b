"""
services/user_service.py
------------------------

Profile and cart operations for the calling user.  Reads go through
the ``users`` cache keyed by user identity; every mutation runs the
matching function from :mod:`app.services.invalidation` once the store
has accepted the change.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from fastapi import HTTPException

from app.db.store import Store
from app.logging_config import logger
from app.schemas.users import AddToCartRequest, UpdateProfileRequest
from app.services.invalidation import invalidate_cart, invalidate_user
from app.utils.cache import CacheSet
from app.utils.cache_keys import USER_CART, USER_PROFILE, entity_key


def get_profile(store: Store, caches: CacheSet, user_id: str) -> Dict[str, Any]:
    def compute() -> Dict[str, Any]:
        user = store.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user.profile()

    return caches.users.get_or_set(entity_key(USER_PROFILE, user_id), compute)


def update_profile(store: Store, caches: CacheSet, user_id: str, data: UpdateProfileRequest) -> Dict[str, Any]:
    """Apply a profile update.

    Regular users may change name, email and phone; only admins may
    change their role.
    """
    if not data.name or not data.email:
        raise HTTPException(status_code=400, detail="Name and email are required")
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    changes: Dict[str, Any] = {"name": data.name, "email": data.email}
    if data.phone is not None:
        changes["phone"] = data.phone
    if data.role is not None and data.role != user.role:
        if user.role != "admin":
            raise HTTPException(status_code=403, detail="Unauthorized action")
        changes["role"] = data.role
    updated = store.update_user(user_id, **changes)
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    invalidate_user(caches, user_id)
    logger.info(json.dumps({"event": "profile_updated", "user": user_id, "fields": sorted(changes)}))
    return {"message": "User updated successfully", "user": updated.profile()}


def get_cart(store: Store, caches: CacheSet, user_id: str) -> List[Dict[str, Any]]:
    """Cart lines with the full product document and the quantity."""

    def compute() -> List[Dict[str, Any]]:
        user = store.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        products = store.get_products([line.product for line in user.cart])
        return [
            {
                "product": products[line.product].to_public() if line.product in products else None,
                "quantity": line.quantity,
            }
            for line in user.cart
        ]

    return caches.users.get_or_set(entity_key(USER_CART, user_id), compute)


def add_to_cart(store: Store, caches: CacheSet, user_id: str, data: AddToCartRequest) -> Dict[str, Any]:
    if store.get_product(data.productId) is None:
        raise HTTPException(status_code=404, detail="Product not found")
    cart = store.add_to_cart(user_id, data.productId, data.quantity)
    if cart is None:
        raise HTTPException(status_code=404, detail="User not found")
    invalidate_cart(caches, user_id)
    return {
        "message": "Product added to cart",
        "cart": [line.model_dump() for line in cart],
    }


def remove_from_cart(store: Store, caches: CacheSet, user_id: str, product_id: str) -> Dict[str, Any]:
    cart = store.remove_from_cart(user_id, product_id)
    if cart is None:
        raise HTTPException(status_code=404, detail="User not found")
    invalidate_cart(caches, user_id)
    return {"message": "Product removed from cart"}
