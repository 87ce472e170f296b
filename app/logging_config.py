"""
logging_config.py
------------------

Shared logging configuration and utilities for structured logging
throughout the storefront API.  It uses Python's built‑in ``logging``
module rather than ``print`` so that log output can be captured by
standard logging handlers or shipped to an aggregator.  Messages are
serialised as JSON to make them easier to parse downstream.

To use this module, import ``logger`` and call its methods instead of
``logging.info`` directly.  The ``log_call`` decorator can be applied
to route handlers to record entry and exit points at the DEBUG level
without leaking sensitive values such as passwords.
"""

from __future__ import annotations

import inspect
import json
import logging
import sys
from functools import wraps
from typing import Any, Callable, Dict

# -----------------------------------------------------------------------------
# Configure global logging
# -----------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("storefront")


def configure_level(level: str) -> None:
    """Apply the configured level to the application logger."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def _sanitize(obj: Any) -> Any:
    """Recursively sanitise objects for logging.

    Dictionaries have keys containing 'token', 'password' or 'secret'
    removed.  Lists and tuples are processed element‑wise.  Pydantic
    models are dumped first.  Anything that is still not JSON
    serialisable is replaced by its ``str``.
    """
    if isinstance(obj, (bytes, bytearray)):
        return f"<binary {len(obj)} bytes>"
    if isinstance(obj, dict):
        clean: Dict[str, Any] = {}
        for k, v in obj.items():
            if any(keyword in str(k).lower() for keyword in ("token", "password", "secret")):
                continue
            clean[str(k)] = _sanitize(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [_sanitize(i) for i in obj]
    if hasattr(obj, "model_dump"):
        try:
            return _sanitize(obj.model_dump())
        except Exception:
            return str(obj)
    try:
        return json.loads(json.dumps(obj))
    except (TypeError, ValueError):
        return str(obj)


def log_call(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to log entry and exit of functions.

    Emits ``call_start`` before the wrapped callable runs and
    ``call_end`` afterwards, both at DEBUG.  Objects injected by FastAPI
    (stores, caches) are logged by their ``str`` only.

    Examples
    --------

    >>> @log_call
    ... def add(a, b):
    ...     return a + b
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if logger.isEnabledFor(logging.DEBUG):
            try:
                logger.debug(json.dumps({
                    "event": "call_start",
                    "function": func.__name__,
                    "args": _sanitize(args),
                    "kwargs": _sanitize(kwargs),
                }))
            except Exception:
                logger.debug(json.dumps({"event": "call_start", "function": func.__name__}))
        result = func(*args, **kwargs)
        if logger.isEnabledFor(logging.DEBUG):
            try:
                logger.debug(json.dumps({
                    "event": "call_end",
                    "function": func.__name__,
                    "result": _sanitize(result),
                }))
            except Exception:
                logger.debug(json.dumps({"event": "call_end", "function": func.__name__}))
        return result

    # FastAPI inspects the signature to resolve query parameters and
    # dependencies.  Annotations are evaluated here, against the wrapped
    # function's module, because the wrapper lives in this module.
    wrapper.__signature__ = inspect.signature(func, eval_str=True)  # type: ignore[attr-defined]
    return wrapper
