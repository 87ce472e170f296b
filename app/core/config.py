"""
core/config.py
----------------

Application configuration module.

Defines strongly‑typed settings loaded from the environment using
``pydantic-settings``. These settings control the response cache
(time to live, sweep interval, copy semantics), pagination defaults
and the optional seed document for the in‑memory store. They are read
once at startup; nothing reconfigures them at runtime.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The settings structure is flat and uses environment variables
    prefixed with ``APP_``.  For example, to shorten the cache lifetime
    you can set ``APP_CACHE_DEFAULT_TTL=300``.
    """

    # Response cache
    cache_enabled: bool = Field(True, description="Disable to turn every cache into an always-miss cache.")
    cache_default_ttl: float = Field(3600.0, gt=0, description="Lifetime of a cache entry in seconds.")
    cache_sweep_interval: float = Field(120.0, gt=0, description="Seconds between background expiry sweeps.")
    cache_copy_on_read: bool = Field(False, description="Return deep copies of cached values instead of references.")

    # Pagination
    default_page_limit: int = Field(10, ge=1, description="Page size used when the client sends none.")
    max_page_limit: int = Field(100, ge=1, description="Upper bound for the page size a client may request.")

    # Catalogue queries
    top_rating_threshold: float = Field(4.0, ge=0, le=5, description="Minimum rating listed by top-products.")
    price_range_default_min: float = Field(0.0, ge=0)
    price_range_default_max: float = Field(200.0, ge=0)

    seed_file: Optional[str] = Field(None, description="JSON document used to seed the in-memory store.")
    log_level: str = Field("INFO")

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=None, case_sensitive=False)

    @model_validator(mode="after")
    def _sweep_shorter_than_ttl(self) -> "Settings":
        if self.cache_sweep_interval >= self.cache_default_ttl:
            raise ValueError("cache_sweep_interval must be shorter than cache_default_ttl")
        if self.default_page_limit > self.max_page_limit:
            raise ValueError("default_page_limit cannot exceed max_page_limit")
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the application settings.

    Using a cache prevents expensive environment parsing on every call.
    Tests that change the environment must call
    ``get_settings.cache_clear()``.
    """
    return Settings()
