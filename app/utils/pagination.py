"""
utils/pagination.py
--------------------

Helpers for page/limit handling on the catalogue listings.

Clients pass ``page`` and ``limit`` as query parameters.  Anything that
is missing, not a number or not positive falls back to the default
(page ``1``, limit from :class:`app.core.config.Settings`), and the
limit is capped so a single request cannot pull the whole catalogue.
The normalised values are what the handlers put into their cache keys,
so ``?page=0`` and ``?page=1`` share one entry.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from app.core.config import Settings, get_settings


def _positive_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def page_request(page: Optional[str], limit: Optional[str], settings: Optional[Settings] = None) -> PageRequest:
    """Normalise raw ``page``/``limit`` query values.

    :param page: raw page number, 1‑based
    :param limit: raw page size
    :param settings: settings to read defaults from, the global ones if omitted
    :return: a :class:`PageRequest` with defaults substituted
    """
    settings = settings or get_settings()
    size = _positive_int(limit) or settings.default_page_limit
    return PageRequest(
        page=_positive_int(page) or 1,
        limit=min(size, settings.max_page_limit),
    )


def page_envelope(total: int, request: PageRequest, products: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Build the paginated response body used by the product listings."""
    return {
        "totalProducts": total,
        "currentPage": request.page,
        "totalPages": math.ceil(total / request.limit),
        "products": products,
    }
