"""
Route aggregation package for the storefront API.

Each functional area (categories, products and cart, users, orders,
operational endpoints) is its own module defining an ``APIRouter``.
The main application imports these routers and mounts them under
``/api/v1``.
"""

__all__ = [
    "categories",
    "health",
    "orders",
    "products",
    "users",
]

# Import submodules so their routers can be registered by main.py
from . import categories, health, orders, products, users  # noqa: E402,F401
