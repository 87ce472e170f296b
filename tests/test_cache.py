import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.utils.cache import MISSING, CacheSet, TTLCache


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=60, sweep_interval=10, namespace="test", time_func=clock)


def test_miss_then_hit(cache):
    assert cache.get("k") is None
    value = {"products": [1, 2, 3]}
    cache.set("k", value)
    assert cache.get("k") is value
    assert cache.stats()["hits"] == 1
    assert cache.stats()["misses"] == 1


def test_missing_sentinel_distinguishes_cached_none(cache):
    cache.set("none", None)
    assert cache.get("none", MISSING) is None
    assert cache.get("absent", MISSING) is MISSING


def test_overwrite_replaces_value_and_ttl(cache, clock):
    cache.set("k", "v1")
    clock.advance(50)
    cache.set("k", "v2")
    clock.advance(50)
    # the first write would have expired by now
    assert cache.get("k") == "v2"


def test_entry_expires_at_ttl_without_sweep(cache, clock):
    cache.set("k", "v")
    clock.advance(59.999)
    assert cache.get("k") == "v"
    clock.advance(0.001)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_explicit_ttl_overrides_default(cache, clock):
    cache.set("short", "v", ttl=5)
    clock.advance(5)
    assert cache.get("short") is None


def test_contains_only_reports_live_entries(cache, clock):
    cache.set("k", "v")
    assert "k" in cache
    clock.advance(60)
    assert "k" not in cache


def test_sweep_removes_dead_entries(cache, clock):
    for i in range(25):
        cache.set(f"k{i}", i)
    cache.set("fresh", "late", ttl=1000)
    clock.advance(60 + cache.sweep_interval)

    assert len(cache) == 26
    assert cache.sweep() == 25
    assert len(cache) == 1
    assert cache.stats()["size"] == 1


def test_background_sweeper_empties_cache(clock):
    cache = TTLCache(default_ttl=1, sweep_interval=0.01, namespace="bg", time_func=clock)
    for i in range(10):
        cache.set(i, i)
    clock.advance(1.01)
    cache.start_sweeper()
    try:
        deadline = time.monotonic() + 2
        while len(cache) and time.monotonic() < deadline:
            time.sleep(0.01)
        assert len(cache) == 0
    finally:
        cache.stop_sweeper()
    assert not cache.sweeper_running


def test_stop_sweeper_is_prompt_and_idempotent(cache):
    cache.start_sweeper()
    assert cache.sweeper_running
    started = time.monotonic()
    cache.stop_sweeper()
    assert time.monotonic() - started < cache.sweep_interval
    cache.stop_sweeper()
    assert not cache.sweeper_running


def test_delete_is_idempotent(cache):
    cache.set("keep", 1)
    cache.delete("absent")
    assert len(cache) == 1

    cache.set("k", "v")
    cache.delete("k")
    assert cache.get("k") is None
    cache.delete("k")
    assert cache.get("keep") == 1


def test_clear(cache):
    cache.set("a", 1)
    cache.set("b", 2)
    cache.clear()
    assert len(cache) == 0


def test_get_or_set_computes_once(cache):
    calls = []

    def compute():
        calls.append(1)
        return {"n": len(calls)}

    assert cache.get_or_set("k", compute) == {"n": 1}
    assert cache.get_or_set("k", compute) == {"n": 1}
    assert len(calls) == 1


def test_get_or_set_propagates_source_errors(cache):
    def compute():
        raise LookupError("store down")

    with pytest.raises(LookupError):
        cache.get_or_set("k", compute)
    assert "k" not in cache


def test_copy_on_read_returns_independent_values(clock):
    cache = TTLCache(60, 10, copy_on_read=True, time_func=clock)
    cache.set("k", {"items": [1]})
    first = cache.get("k")
    first["items"].append(2)
    assert cache.get("k") == {"items": [1]}


def test_disabled_cache_always_misses(clock):
    cache = TTLCache(60, 10, enabled=False, time_func=clock)
    cache.set("k", "v")
    assert cache.get("k") is None
    assert len(cache) == 0
    assert cache.stats()["misses"] == 1


def test_internal_fault_degrades_to_miss():
    def broken_clock():
        raise OSError("clock unavailable")

    cache = TTLCache(60, 10, time_func=broken_clock)
    cache.set("k", "v")
    assert cache.get("k", "fallback") == "fallback"
    assert cache.get_or_set("k", lambda: "from-source") == "from-source"
    assert "k" not in cache


class _BrokenMapping(dict):
    def clear(self):
        raise MemoryError("storage fault")

    def __len__(self):
        raise MemoryError("storage fault")


def test_operational_calls_survive_storage_faults(cache):
    cache.set("k", "v")
    cache._store = _BrokenMapping(cache._store)

    cache.clear()
    stats = cache.stats()
    assert stats["size"] is None
    assert stats["namespace"] == "test"
    assert "k" in cache


def test_invalid_configuration_is_rejected():
    with pytest.raises(ValueError):
        TTLCache(default_ttl=0)
    with pytest.raises(ValueError):
        TTLCache(default_ttl=10, sweep_interval=0)


def test_concurrent_access_on_one_key(cache):
    errors = []

    def worker(n):
        try:
            for i in range(200):
                cache.set("shared", (n, i))
                value = cache.get("shared")
                assert value is not None
        except Exception as exc:  # pragma: no cover - reported below
            errors.append(exc)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(worker, range(8)))

    assert errors == []
    assert len(cache) == 1
    n, i = cache.get("shared")
    assert i == 199
    cache.set("shared", "last")
    assert cache.get("shared") == "last"


def test_concurrent_sweep_and_writes(clock):
    cache = TTLCache(default_ttl=1, sweep_interval=0.001, time_func=clock)
    stop = threading.Event()

    def sweeper():
        while not stop.is_set():
            cache.sweep()

    thread = threading.Thread(target=sweeper)
    thread.start()
    try:
        for i in range(500):
            cache.set(f"k{i}", i, ttl=1000)
    finally:
        stop.set()
        thread.join()
    assert len(cache) == 500


def test_cache_set_groups_domains(clock):
    caches = CacheSet(60, 10, time_func=clock)
    caches.products.set("k", 1)
    caches.users.set("k", 2)
    assert caches.categories.get("k") is None
    assert [s["namespace"] for s in caches.stats()] == ["categories", "products", "users"]
    caches.start()
    try:
        assert all(c.sweeper_running for c in caches)
    finally:
        caches.stop()
    caches.clear()
    assert sum(len(c) for c in caches) == 0
