"""
utils/cache.py
---------------

In‑process response cache with TTL support. Read handlers use it to
avoid repeating store queries for read‑heavy endpoints (category list,
top products, category browsing, search, user profile and cart) and
write handlers delete the affected keys after a successful mutation.

Expiry is enforced twice: lazily on every :meth:`TTLCache.get`, so a
caller is never served an expired entry, and eagerly by a background
sweeper thread that removes dead entries every ``sweep_interval``
seconds. FastAPI runs synchronous handlers in a threadpool, so the
mapping is guarded by a lock. The sweeper takes the lock once per
removed entry rather than for the whole pass.

Instances are created by the application lifespan (see
:mod:`app.main`) and handed to handlers through dependencies; there is
no module level cache object.
"""

from __future__ import annotations

import copy
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from app.logging_config import logger


class _Missing:
    """Sentinel type for "no live entry"."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass
class CacheEntry:
    value: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """Thread‑safe in‑memory cache with per‑entry time to live.

    The cache does not enforce a maximum size; memory is bounded by
    expiry only. Values are stored by reference. When ``copy_on_read``
    is enabled a deep copy is returned from :meth:`get` so callers may
    mutate what they receive.

    :param default_ttl: lifetime in seconds applied by :meth:`set`
        when no explicit ``ttl`` is given
    :param sweep_interval: seconds between background sweeps
    :param namespace: label used in logs and :meth:`stats`
    :param copy_on_read: deep copy values returned by :meth:`get`
    :param enabled: when ``False`` every lookup is a miss and nothing
        is stored
    :param time_func: clock returning seconds; injectable for tests
    """

    def __init__(
        self,
        default_ttl: float = 3600.0,
        sweep_interval: float = 120.0,
        *,
        namespace: str = "",
        copy_on_read: bool = False,
        enabled: bool = True,
        time_func: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        if sweep_interval <= 0:
            raise ValueError("sweep_interval must be positive")
        self.default_ttl = float(default_ttl)
        self.sweep_interval = float(sweep_interval)
        self.namespace = namespace
        self.copy_on_read = copy_on_read
        self.enabled = enabled
        self._time_func = time_func
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._stop_event = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value stored under ``key``.

        An expired entry is removed and reported as a miss even if the
        sweeper has not reached it yet. Missing keys are not an error.

        :param key: cache key
        :param default: returned on a miss
        :return: cached value or ``default``
        """
        if not self.enabled:
            self._count(hit=False)
            return default
        try:
            now = self._time_func()
            with self._lock:
                entry = self._store.get(key)
                if entry is None:
                    self._misses += 1
                    return default
                if entry.is_expired(now):
                    del self._store[key]
                    self._misses += 1
                    return default
                self._hits += 1
                value = entry.value
            if self.copy_on_read:
                return copy.deepcopy(value)
            return value
        except Exception as exc:
            self._fault("get", key, exc)
            return default

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Insert or fully replace the entry for ``key``.

        :param key: cache key
        :param value: value to cache (stored by reference)
        :param ttl: lifetime in seconds, defaults to ``default_ttl``
        """
        if not self.enabled:
            return
        lifetime = self.default_ttl if ttl is None else float(ttl)
        try:
            now = self._time_func()
            entry = CacheEntry(value=value, created_at=now, expires_at=now + lifetime)
            with self._lock:
                self._store[key] = entry
        except Exception as exc:
            self._fault("set", key, exc)

    def delete(self, key: str) -> None:
        """Remove ``key`` if present; a no‑op otherwise."""
        try:
            with self._lock:
                self._store.pop(key, None)
        except Exception as exc:
            self._fault("delete", key, exc)

    def clear(self) -> None:
        """Clear all entries from the cache."""
        try:
            with self._lock:
                self._store.clear()
        except Exception as exc:
            self._fault("clear", "*", exc)

    def get_or_set(self, key: str, compute: Callable[[], Any], ttl: Optional[float] = None) -> Any:
        """Read‑through helper used by the read handlers.

        On a miss ``compute`` is called outside the lock and its result
        is stored. Exceptions raised by ``compute`` come from the data
        source and propagate unchanged.
        """
        value = self.get(key, MISSING)
        if value is not MISSING:
            return value
        value = compute()
        self.set(key, value, ttl)
        return value

    def sweep(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self._time_func()
        with self._lock:
            candidates = [k for k, e in self._store.items() if e.is_expired(now)]
        removed = 0
        for key in candidates:
            with self._lock:
                entry = self._store.get(key)
                # the key may have been refreshed since the snapshot
                if entry is not None and entry.is_expired(now):
                    del self._store[key]
                    removed += 1
        if removed:
            logger.debug(json.dumps({
                "event": "cache_sweep",
                "namespace": self.namespace,
                "removed": removed,
            }))
        return removed

    def stats(self) -> Dict[str, Any]:
        """Counters for this instance; ``size`` is ``None`` when it cannot be read."""
        try:
            with self._lock:
                size = len(self._store)
        except Exception as exc:
            self._fault("stats", "*", exc)
            size = None
        return {
            "namespace": self.namespace,
            "size": size,
            "hits": self._hits,
            "misses": self._misses,
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        try:
            now = self._time_func()
            with self._lock:
                entry = self._store.get(key)  # type: ignore[arg-type]
                return entry is not None and not entry.is_expired(now)
        except Exception as exc:
            self._fault("contains", str(key), exc)
            return False

    # ------------------------------------------------------------------
    # Background sweeper
    # ------------------------------------------------------------------

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def start_sweeper(self) -> None:
        """Start the daemon thread that calls :meth:`sweep` periodically."""
        if self.sweeper_running:
            logger.warning(json.dumps({"event": "cache_sweeper_already_running", "namespace": self.namespace}))
            return
        self._stop_event.clear()
        self._sweeper = threading.Thread(
            target=self._run_sweeper,
            name=f"cache-sweeper-{self.namespace or 'default'}",
            daemon=True,
        )
        self._sweeper.start()
        logger.info(json.dumps({
            "event": "cache_sweeper_started",
            "namespace": self.namespace,
            "interval": self.sweep_interval,
        }))

    def stop_sweeper(self, timeout: float = 5.0) -> None:
        """Signal the sweeper to exit and wait for it."""
        thread = self._sweeper
        if thread is None:
            return
        self._stop_event.set()
        thread.join(timeout)
        self._sweeper = None
        logger.info(json.dumps({"event": "cache_sweeper_stopped", "namespace": self.namespace}))

    def _run_sweeper(self) -> None:
        while not self._stop_event.wait(self.sweep_interval):
            try:
                self.sweep()
            except Exception:
                logger.exception(json.dumps({"event": "cache_sweep_failed", "namespace": self.namespace}))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _count(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def _fault(self, operation: str, key: str, exc: Exception) -> None:
        # degrade to a miss / no-op; the caller falls through to the store
        try:
            logger.warning(json.dumps({
                "event": "cache_fault",
                "namespace": self.namespace,
                "operation": operation,
                "key": key,
                "error": repr(exc),
            }))
        except Exception:
            logger.warning(f"cache_fault {self.namespace} {operation}: {exc!r}")


class CacheSet:
    """One :class:`TTLCache` per logical domain.

    ``categories`` holds the category list, ``products`` the product
    listings and search results, ``users`` the per‑user profile and
    cart views.
    """

    def __init__(
        self,
        default_ttl: float = 3600.0,
        sweep_interval: float = 120.0,
        *,
        copy_on_read: bool = False,
        enabled: bool = True,
        time_func: Callable[[], float] = time.monotonic,
    ) -> None:
        def make(namespace: str) -> TTLCache:
            return TTLCache(
                default_ttl,
                sweep_interval,
                namespace=namespace,
                copy_on_read=copy_on_read,
                enabled=enabled,
                time_func=time_func,
            )

        self.categories = make("categories")
        self.products = make("products")
        self.users = make("users")

    def __iter__(self):
        return iter((self.categories, self.products, self.users))

    def start(self) -> None:
        for cache in self:
            cache.start_sweeper()

    def stop(self) -> None:
        for cache in self:
            cache.stop_sweeper()

    def clear(self) -> None:
        for cache in self:
            cache.clear()

    def stats(self) -> List[Dict[str, Any]]:
        return [cache.stats() for cache in self]
