"""
routes/products.py
-------------------

Catalogue browsing and the caller's cart.  Query values are taken as
raw strings and normalised by :func:`app.utils.pagination.page_request`
so that malformed ``page``/``limit`` values fall back to their
defaults instead of failing the request.  ``minPrice``/``maxPrice``
behave the same way: a bound that is not a non‑negative number is
replaced by its configured default.

The cart routes are declared before ``/{productId}`` so that
``/cart`` is not captured as a product id.
"""

from __future__ import annotations

import math
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import Settings
from app.core.context import get_app_settings, get_caches, get_current_user_id, get_store
from app.db.store import Store
from app.logging_config import log_call, logger
import json
from app.schemas.users import AddToCartRequest
from app.services import product_service, user_service
from app.utils.cache import CacheSet
from app.utils.pagination import page_request

router = APIRouter()


def _price(raw: Optional[str]) -> Optional[float]:
    """Parse a price bound; anything unusable falls back to the default."""
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if value < 0 or not math.isfinite(value):
        return None
    return value


@router.get("/top-products")
@log_call
def get_top_products(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
):
    return product_service.top_products(store, caches, page_request(page, limit, settings), settings)


@router.get("/category")
@log_call
def get_products_by_category(
    category: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
):
    return product_service.products_by_category(store, caches, category, page_request(page, limit, settings))


@router.get("/price-range")
@log_call
def get_products_between_price_range(
    minPrice: Optional[str] = Query(None),
    maxPrice: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    settings: Settings = Depends(get_app_settings),
    user_id: str = Depends(get_current_user_id),
):
    return product_service.products_by_price_range(
        store, caches, _price(minPrice), _price(maxPrice), page_request(page, limit, settings), settings
    )


@router.get("/search")
@log_call
def get_search_products(
    search: Optional[str] = Query(None),
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    return product_service.search_products(store, caches, search)


@router.get("/cart")
@log_call
def get_products_of_cart(
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    return user_service.get_cart(store, caches, user_id)


@router.post("/cart")
@log_call
def post_add_product_to_cart(
    data: AddToCartRequest,
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    try:
        logger.info(json.dumps({
            "event": "add_to_cart_request",
            "user": user_id,
            "product": data.productId,
            "quantity": data.quantity,
        }))
    except Exception:
        logger.info(json.dumps({"event": "add_to_cart_request"}))
    return user_service.add_to_cart(store, caches, user_id, data)


@router.delete("/cart/{productId}")
@log_call
def delete_product_from_cart(
    productId: str,
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    return user_service.remove_from_cart(store, caches, user_id, productId)


@router.get("/{productId}")
@log_call
def get_product_details(
    productId: str,
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    return product_service.product_details(store, productId)
