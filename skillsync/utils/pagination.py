import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Query

from skillsync.config import settings


def normalize_page(page: Optional[int] = None, limit: Optional[int] = None) -> Tuple[int, int]:
    """Clamp page/limit to sane values: page >= 1, 1 <= limit <= MAX_PAGE_SIZE."""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else settings.DEFAULT_PAGE_SIZE
    return page, min(limit, settings.MAX_PAGE_SIZE)


def pagination_meta(total: int, page: int, limit: int) -> Dict[str, int]:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def paginate(query: Query, page: Optional[int] = None, limit: Optional[int] = None) -> Tuple[List[Any], Dict[str, int]]:
    """
    Run ``query`` for one page.

    The count is taken on the unordered query so ORDER BY does not leak into it.

    Returns:
        Tuple of (items, pagination dict)
    """
    page, limit = normalize_page(page, limit)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, pagination_meta(total, page, limit)
