"""
services/product_service.py
---------------------------

Business logic for the category and product catalogue.  Every listing
is read through the response cache: the handler normalises its
parameters, builds the key from all of them, and only queries the
store on a miss.  Product details are not cached.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from app.core.config import Settings, get_settings
from app.db.store import Store
from app.logging_config import logger
from app.utils.cache import MISSING, CacheSet
from app.utils.cache_keys import (
    CATEGORIES_LIST,
    PRODUCT_SEARCH,
    PRODUCTS_BY_CATEGORY,
    PRODUCTS_BY_PRICE,
    TOP_PRODUCTS,
    build_key,
)
from app.utils.pagination import PageRequest, page_envelope


def _public(records) -> List[Dict[str, Any]]:
    return [r.to_public() for r in records]


def list_categories(store: Store, caches: CacheSet) -> List[Dict[str, Any]]:
    return caches.categories.get_or_set(
        build_key(CATEGORIES_LIST),
        lambda: _public(store.list_categories()),
    )


def top_products(
    store: Store,
    caches: CacheSet,
    paging: PageRequest,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """Products rated at or above the configured threshold, best first."""
    threshold = (settings or get_settings()).top_rating_threshold

    def compute() -> Dict[str, Any]:
        products, total = store.top_products(threshold, paging.skip, paging.limit)
        return page_envelope(total, paging, _public(products))

    key = build_key(TOP_PRODUCTS, page=paging.page, limit=paging.limit, min_rating=threshold)
    return caches.products.get_or_set(key, compute)


def products_by_category(store: Store, caches: CacheSet, category: Optional[str], paging: PageRequest) -> Dict[str, Any]:
    """Products belonging to any category whose name contains ``category``.

    :raises HTTPException: 400 without a category, 404 when no category
        name matches
    """
    if not category or not category.strip():
        raise HTTPException(status_code=400, detail="Category name is required")
    category = category.strip()
    key = build_key(PRODUCTS_BY_CATEGORY, category=category, page=paging.page, limit=paging.limit)
    cached = caches.products.get(key, MISSING)
    if cached is not MISSING:
        return cached

    matches = store.find_categories(category)
    if not matches:
        # not cached: the category may be created before the TTL would expire
        raise HTTPException(status_code=404, detail="No categories found matching that name")
    products, total = store.products_in_categories([c.id for c in matches], paging.skip, paging.limit)
    result = page_envelope(total, paging, _public(products))
    caches.products.set(key, result)
    return result


def products_by_price_range(
    store: Store,
    caches: CacheSet,
    min_price: Optional[float],
    max_price: Optional[float],
    paging: PageRequest,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    settings = settings or get_settings()
    low = settings.price_range_default_min if min_price is None else min_price
    high = settings.price_range_default_max if max_price is None else max_price

    def compute() -> Dict[str, Any]:
        products, total = store.products_in_price_range(low, high, paging.skip, paging.limit)
        return page_envelope(total, paging, _public(products))

    key = build_key(PRODUCTS_BY_PRICE, min_price=low, max_price=high, page=paging.page, limit=paging.limit)
    return caches.products.get_or_set(key, compute)


def search_products(store: Store, caches: CacheSet, search: Optional[str]) -> Dict[str, Any]:
    """Word based, case‑insensitive search on product names.

    The term is normalised (trimmed, case‑folded, inner whitespace
    collapsed) before it becomes part of the key, so "Apple  Juice"
    and "apple juice" share one cache entry.
    """
    term = " ".join((search or "").split())
    if not term:
        raise HTTPException(status_code=400, detail="Search query is required")

    def compute() -> Dict[str, Any]:
        products = store.search_products(term)
        return {"totalProducts": len(products), "products": _public(products)}

    result = caches.products.get_or_set(build_key(PRODUCT_SEARCH, search=term), compute)
    try:
        logger.info(json.dumps({"event": "product_search", "term": term, "total": result["totalProducts"]}))
    except Exception:
        logger.info(f"product_search {term!r}")
    return result


def product_details(store: Store, product_id: str) -> Dict[str, Any]:
    product = store.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product.to_public()
