"""
utils/cache_keys.py
--------------------

Deterministic cache key construction.

Read handlers whose result depends on request parameters build their
key with :func:`build_key`: the operation name followed by every
parameter that affects the result, sorted by name so the order in
which a client supplied its query string does not matter. String
values are stripped and case‑folded, numbers are rendered in one
canonical form and every value is percent‑quoted so that a value can
never impersonate a separator.

User‑scoped entries (profile, cart) are addressed by identity with
:func:`entity_key`, which keeps the identifier exactly as given.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote


def _normalize(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value.strip().casefold()
    return str(value).strip().casefold()


def build_key(operation: str, **params: Any) -> str:
    """Return the cache key for ``operation`` called with ``params``.

    ``None`` parameters are left out, so callers must substitute their
    defaults before building the key.

    >>> build_key("products:category", page=2, category="Fruits", limit=10)
    'products:category?category=fruits&limit=10&page=2'
    """
    parts = [
        f"{quote(name, safe='')}={quote(_normalize(value), safe='')}"
        for name, value in sorted(params.items())
        if value is not None
    ]
    if not parts:
        return operation
    return f"{operation}?{'&'.join(parts)}"


def entity_key(operation: str, entity_id: str) -> str:
    """Return the key for data owned by a single entity, e.g. a user."""
    return f"{operation}:{quote(str(entity_id), safe='')}"


CATEGORIES_LIST = "categories:list"
TOP_PRODUCTS = "products:top"
PRODUCTS_BY_CATEGORY = "products:category"
PRODUCTS_BY_PRICE = "products:price-range"
PRODUCT_SEARCH = "products:search"
USER_PROFILE = "user-profile"
USER_CART = "user-cart"
