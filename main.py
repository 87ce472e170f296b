"""
Root application entry point for the storefront API
====================================================

This module exposes the FastAPI application instance defined in
``app/main.py`` so that deployment tools like Uvicorn can import
``main:app`` without needing to treat the repository as a Python
package.

Usage
-----

.. code-block:: bash

    uvicorn main:app --host 0.0.0.0 --port 8000

Configuration is read from ``APP_*`` environment variables, see
:mod:`app.core.config`.
"""

from app.main import app  # noqa: F401 re-export for Uvicorn

__all__ = ["app"]
