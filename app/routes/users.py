"""
routes/users.py
----------------

Profile of the calling user.  Reads are cached per user; an update
invalidates that user's entry before the response is returned.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends

from app.core.context import get_caches, get_current_user_id, get_store
from app.db.store import Store
from app.logging_config import log_call, logger
from app.schemas.users import UpdateProfileRequest
from app.services.user_service import get_profile, update_profile
from app.utils.cache import CacheSet

router = APIRouter()


@router.get("/me")
@log_call
def get_my_profile(
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    return get_profile(store, caches, user_id)


@router.put("/me")
@log_call
def put_my_profile(
    data: UpdateProfileRequest,
    store: Store = Depends(get_store),
    caches: CacheSet = Depends(get_caches),
    user_id: str = Depends(get_current_user_id),
):
    try:
        logger.info(json.dumps({"event": "update_profile_request", "user": user_id}))
    except Exception:
        logger.info(json.dumps({"event": "update_profile_request"}))
    return update_profile(store, caches, user_id, data)
