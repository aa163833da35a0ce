"""
Page/limit handling shared by every list and search endpoint.

The envelope returned to clients is always:
    {"data": [...], "total": int, "page": int, "limit": int, "totalPages": int}
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT


def _to_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_params(raw_page: Any = None, raw_limit: Any = None) -> PageParams:
    """
    Turn raw query values into usable page/limit.

    Missing, zero or non-numeric values fall back to the defaults; the
    result is clamped to page >= 1 and 1 <= limit <= MAX_LIMIT.
    """
    page = _to_int(raw_page) or DEFAULT_PAGE
    limit = _to_int(raw_limit) or DEFAULT_LIMIT
    return PageParams(
        page=max(page, 1),
        limit=min(max(limit, 1), MAX_LIMIT),
    )


def compute_offset_and_pages(page: int, limit: int, total: int) -> tuple[int, int]:
    # Callers may build PageParams without parse_params.
    page = max(page, 1)
    limit = max(limit, 1)
    offset = (page - 1) * limit
    total_pages = math.ceil(total / limit)
    return offset, total_pages


def wrap(data: list[Any], total: int, page: int, limit: int) -> dict[str, Any]:
    _, total_pages = compute_offset_and_pages(page, limit, total)
    return {
        "data": data,
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": total_pages,
    }
