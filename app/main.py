# main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

# Import logging utilities early so that the logger configuration is
# applied before any other modules emit log messages.
from app.logging_config import configure_level, logger
import json
import time

from app.core.config import Settings, get_settings
from app.db.store import Store
from app.routes.categories import router as categories_router
from app.routes.health import router as health_router
from app.routes.orders import router as orders_router
from app.routes.products import router as products_router
from app.routes.users import router as users_router
from app.utils.cache import CacheSet


def build_caches(settings: Settings) -> CacheSet:
    return CacheSet(
        settings.cache_default_ttl,
        settings.cache_sweep_interval,
        copy_on_read=settings.cache_copy_on_read,
        enabled=settings.cache_enabled,
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[Store] = None,
    caches: Optional[CacheSet] = None,
) -> FastAPI:
    """Build the application.

    The store and caches are the shared state of the process; pass your
    own to control them (tests do), otherwise they are built from the
    settings when the application starts.
    """
    settings = settings or get_settings()
    configure_level(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store if store is not None else Store.from_seed_file(settings.seed_file)
        app.state.caches = caches if caches is not None else build_caches(settings)
        app.state.caches.start()
        try:
            yield
        finally:
            app.state.caches.stop()

    app = FastAPI(title="Storefront API", default_response_class=ORJSONResponse, lifespan=lifespan)
    app.state.settings = settings

    # registrar routers
    app.include_router(users_router, prefix="/api/v1/users", tags=["users"])
    app.include_router(products_router, prefix="/api/v1/products", tags=["products"])
    app.include_router(orders_router, prefix="/api/v1/orders", tags=["orders"])
    app.include_router(categories_router, prefix="/api/v1/categories", tags=["categories"])
    app.include_router(health_router, tags=["ops"])

    # -----------------------------------------------------------------
    # Request logging middleware
    # -----------------------------------------------------------------
    # One JSON line per request with path, method, status and duration.
    @app.middleware("http")  # type: ignore[misc]
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        try:
            logger.info(json.dumps({
                "event": "http_request",
                "path": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }))
        except Exception:
            logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({round(duration_ms,2)} ms)")
        return response

    return app


app = create_app()
