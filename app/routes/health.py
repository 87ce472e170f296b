"""
routes/health.py
-----------------

Operational endpoints: liveness with cache statistics, and a manual
clear of every response cache.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends

from app.core.context import get_caches
from app.logging_config import logger
from app.utils.cache import CacheSet

router = APIRouter()


@router.get("/health")
def health(caches: CacheSet = Depends(get_caches)):
    return {"status": "ok", "cache": caches.stats()}


@router.delete("/api/v1/cache")
def clear_caches(caches: CacheSet = Depends(get_caches)):
    caches.clear()
    logger.info(json.dumps({"event": "cache_cleared"}))
    return {"message": "Cache cleared"}
