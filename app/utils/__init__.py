"""
Utility package: the response cache, cache key construction and
pagination helpers shared by the services.
"""

from .cache import MISSING, CacheEntry, CacheSet, TTLCache
from .cache_keys import build_key, entity_key

__all__ = ["MISSING", "CacheEntry", "CacheSet", "TTLCache", "build_key", "entity_key"]
