"""Page/limit helpers shared by list endpoints."""

from __future__ import annotations

import math
from typing import Any

from app.utils.errors import InvalidInputError


def paginate(page: int, limit: int) -> tuple[int, int]:
    """Validate 1-based ``page``/``limit`` and return ``(offset, limit)``."""
    if page < 1:
        raise InvalidInputError("page must be >= 1")
    if limit < 1:
        raise InvalidInputError("limit must be >= 1")
    return (page - 1) * limit, limit


def page_count(total: int, limit: int) -> int:
    """Return ``ceil(total / limit)``."""
    return math.ceil(total / limit) if limit > 0 else 0


def pagination_meta(page: int, limit: int, total: int) -> dict[str, Any]:
    """Build the pagination block returned alongside list payloads."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": page_count(total, limit),
    }
