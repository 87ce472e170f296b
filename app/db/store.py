"""
db/store.py
-----------

Thread‑safe in‑memory data store. It is the authoritative source the
read handlers fall through to on a cache miss and the target of every
write handler.

Each query mirrors one of the catalogue queries exposed by the API:
filter, sort, skip and limit, plus the matching count.  Records are
returned as copies so that nothing outside the store can mutate its
state without going through a write method.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from app.logging_config import logger
from app.models import CartLine, Category, Order, Product, User


def _by_rating(product: Product) -> Tuple[float, float]:
    return (-product.rating, -product.created_at.timestamp())


def _by_price(product: Product) -> Tuple[float, float]:
    return (product.price, -product.created_at.timestamp())


def _tokens(text: str) -> List[str]:
    return text.casefold().split()


class Store:
    """In‑memory collections of categories, products, users and orders."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._categories: Dict[str, Category] = {}
        self._products: Dict[str, Product] = {}
        self._users: Dict[str, User] = {}
        self._orders: Dict[str, Order] = {}

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_category(self, category: Category) -> Category:
        with self._lock:
            self._categories[category.id] = category
        return category.model_copy(deep=True)

    def add_product(self, product: Product) -> Product:
        with self._lock:
            self._products[product.id] = product
        return product.model_copy(deep=True)

    def add_user(self, user: User) -> User:
        with self._lock:
            self._users[user.id] = user
        return user.model_copy(deep=True)

    def load(self, document: Dict[str, Any]) -> None:
        """Populate the store from a seed document.

        Products may reference their category by id or by name.
        """
        for raw in document.get("categories", []):
            self.add_category(Category.model_validate(raw))
        by_name = {c.name.casefold(): c.id for c in self._categories.values()}
        for raw in document.get("products", []):
            raw = dict(raw)
            ref = str(raw.get("category", ""))
            if ref not in self._categories and ref.casefold() in by_name:
                raw["category"] = by_name[ref.casefold()]
            self.add_product(Product.model_validate(raw))
        for raw in document.get("users", []):
            self.add_user(User.model_validate(raw))

    @classmethod
    def from_seed_file(cls, path: Optional[str]) -> "Store":
        store = cls()
        if not path:
            return store
        document = json.loads(Path(path).read_text(encoding="utf-8"))
        store.load(document)
        logger.info(json.dumps({
            "event": "store_seeded",
            "file": path,
            "categories": len(store._categories),
            "products": len(store._products),
            "users": len(store._users),
        }))
        return store

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Category]:
        with self._lock:
            return [c.model_copy(deep=True) for c in self._categories.values()]

    def find_categories(self, name: str) -> List[Category]:
        """Case‑insensitive partial match on the category name."""
        needle = name.casefold()
        with self._lock:
            return [c.model_copy(deep=True) for c in self._categories.values() if needle in c.name.casefold()]

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def _query_products(
        self,
        predicate: Callable[[Product], bool],
        sort_key: Callable[[Product], Any],
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[List[Product], int]:
        with self._lock:
            matches = sorted((p for p in self._products.values() if predicate(p)), key=sort_key)
            total = len(matches)
            end = None if limit is None else skip + limit
            return [p.model_copy(deep=True) for p in matches[skip:end]], total

    def top_products(self, min_rating: float, skip: int, limit: int) -> Tuple[List[Product], int]:
        return self._query_products(lambda p: p.rating >= min_rating, _by_rating, skip, limit)

    def products_in_categories(self, category_ids: Iterable[str], skip: int, limit: int) -> Tuple[List[Product], int]:
        wanted = set(category_ids)
        return self._query_products(lambda p: p.category in wanted, _by_rating, skip, limit)

    def products_in_price_range(self, min_price: float, max_price: float, skip: int, limit: int) -> Tuple[List[Product], int]:
        return self._query_products(lambda p: min_price <= p.price <= max_price, _by_price, skip, limit)

    def search_products(self, term: str) -> List[Product]:
        """Products whose name contains any word of ``term``.

        Matching is case‑insensitive and word based: ``"red apple"``
        matches "Apple Juice" and "Red Onion" but not "Pineapple".
        """
        wanted = set(_tokens(term))

        def matches(product: Product) -> bool:
            return not wanted.isdisjoint(_tokens(product.name))

        products, _ = self._query_products(matches, _by_rating)
        return products

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            product = self._products.get(product_id)
            return product.model_copy(deep=True) if product else None

    def get_products(self, product_ids: Sequence[str]) -> Dict[str, Product]:
        with self._lock:
            return {pid: self._products[pid].model_copy(deep=True) for pid in product_ids if pid in self._products}

    # ------------------------------------------------------------------
    # Users and carts
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    def update_user(self, user_id: str, **changes: Any) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = user.model_copy(update=changes)
            self._users[user_id] = updated
            return updated.model_copy(deep=True)

    def add_to_cart(self, user_id: str, product_id: str, quantity: int) -> Optional[List[CartLine]]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            for line in user.cart:
                if line.product == product_id:
                    line.quantity += quantity
                    break
            else:
                user.cart.append(CartLine(product=product_id, quantity=quantity))
            return [line.model_copy() for line in user.cart]

    def remove_from_cart(self, user_id: str, product_id: str) -> Optional[List[CartLine]]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            user.cart = [line for line in user.cart if line.product != product_id]
            return [line.model_copy() for line in user.cart]

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def add_order(self, order: Order) -> Order:
        with self._lock:
            self._orders[order.id] = order
        return order.model_copy(deep=True)

    def orders_for_user(self, user_id: str) -> List[Order]:
        with self._lock:
            orders = [o for o in self._orders.values() if o.user == user_id]
            return [o.model_copy(deep=True) for o in sorted(orders, key=lambda o: o.created_at)]
