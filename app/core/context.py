"""
core/context.py
----------------

Request context dependencies.  The store and the response caches are
built once by the application lifespan and kept on ``app.state``;
handlers receive them through these functions via ``Depends`` so that
tests can build an application with their own instances.

The caller is identified by the ``X-User-Id`` header.  Verifying that
identity is the job of the gateway in front of this service.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, Request

from app.core.config import Settings, get_settings
from app.db.store import Store
from app.utils.cache import CacheSet


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_caches(request: Request) -> CacheSet:
    return request.app.state.caches


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Return the caller's user id or reject the request with 401."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()
