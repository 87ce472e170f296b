"""
routes/categories.py
---------------------

Category listing.  The list changes rarely and is served from the
``categories`` cache.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.context import get_caches, get_current_user_id, get_store
from app.db.store import Store
from app.logging_config import log_call
from app.services.product_service import list_categories
from app.utils.cache import CacheSet

router = APIRouter()


@router.get("")
@log_call
def get_categories(
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    return list_categories(store, caches)
