"""
services/invalidation.py
-------------------------

Single place where write handlers drop cached views of the data they
changed.  Each function knows every cache key that embeds the mutated
entity, so a handler only has to say *what* it changed.

Listings keyed by filters (category pages, price ranges, search
results) are not invalidated here; they age out with their TTL.
"""

from __future__ import annotations

import json

from app.logging_config import logger
from app.utils.cache import CacheSet
from app.utils.cache_keys import USER_CART, USER_PROFILE, entity_key


def invalidate_user(caches: CacheSet, user_id: str) -> None:
    """Drop the cached profile of ``user_id``."""
    caches.users.delete(entity_key(USER_PROFILE, user_id))
    logger.info(json.dumps({"event": "cache_invalidated", "scope": "user-profile", "user": user_id}))


def invalidate_cart(caches: CacheSet, user_id: str) -> None:
    """Drop the cached cart of ``user_id``."""
    caches.users.delete(entity_key(USER_CART, user_id))
    logger.info(json.dumps({"event": "cache_invalidated", "scope": "user-cart", "user": user_id}))
