"""
Core helpers package for the storefront API.

Holds configuration loading and the request context dependencies that
hand the shared store and caches to the route handlers.
"""

__all__ = []
