"""
Fixtures and test setup for the pytest suite.
"""

import os

# Set test environment variables BEFORE any application code is imported.
os.environ["APP_LOG_LEVEL"] = "WARNING"
os.environ.pop("APP_SEED_FILE", None)

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.db.store import Store
from app.main import create_app
from app.models import Category, Product, User
from app.utils.cache import CacheSet


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> Store:
    store = Store()
    fruits = store.add_category(Category(id="cat-fruits", name="Fresh Fruits"))
    drinks = store.add_category(Category(id="cat-drinks", name="Drinks"))
    store.add_product(Product(id="p-apple", name="Red Apple", price=1.5, rating=4.6, category=fruits.id))
    store.add_product(Product(id="p-banana", name="Banana", price=0.8, rating=3.9, category=fruits.id))
    store.add_product(Product(id="p-pear", name="Green Pear", price=2.0, rating=4.1, category=fruits.id))
    store.add_product(Product(id="p-juice", name="Apple Juice", price=3.2, rating=4.2, category=drinks.id))
    store.add_product(Product(id="p-wine", name="Red Wine", price=250.0, rating=4.9, category=drinks.id))
    store.add_user(User(id="u-alice", name="Alice", email="alice@example.com"))
    store.add_user(User(id="u-admin", name="Admin", email="admin@example.com", role="admin"))
    return store


@pytest.fixture
def caches(clock: FakeClock) -> CacheSet:
    return CacheSet(default_ttl=3600, sweep_interval=120, time_func=clock)


@pytest.fixture
def client(store: Store, caches: CacheSet):
    app = create_app(store=store, caches=caches)
    with TestClient(app) as test_client:
        yield test_client


ALICE = {"X-User-Id": "u-alice"}
ADMIN = {"X-User-Id": "u-admin"}
