"""Pagination helpers for search, match and recommendation results."""
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar('T')

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass
class Page(Generic[T]):
    """One page of results with its pagination metadata."""
    data: List[T] = field(default_factory=list)
    page: int = 1
    limit: int = DEFAULT_LIMIT
    total: int = 0
    total_pages: int = 0
    has_next: bool = False
    has_prev: bool = False

    def to_dict(self, serialize: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        items = [serialize(item) for item in self.data] if serialize else list(self.data)
        return {
            'data': items,
            'pagination': {
                'page': self.page,
                'limit': self.limit,
                'total': self.total,
                'total_pages': self.total_pages,
                'has_next': self.has_next,
                'has_prev': self.has_prev,
            },
        }


def validate_pagination(page: Any, limit: Any) -> Tuple[int, int]:
    """Clamp page to >= 1 and limit to [1, 100]; unusable values fall back to defaults."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = DEFAULT_LIMIT
    page = max(1, page or 1)
    limit = min(MAX_LIMIT, max(1, limit or DEFAULT_LIMIT))
    return page, limit


def calculate_pagination(total: int, page: int, limit: int) -> Dict[str, Any]:
    """Calculate pagination metadata.

    Args:
        total: Total number of items
        page: Current page (1-based)
        limit: Items per page

    Returns:
        Dictionary with total_pages, has_next and has_prev
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'total_pages': total_pages,
        'has_next': page < total_pages,
        'has_prev': page > 1,
    }


def paginate(items: Sequence[T], page: int = 1, limit: int = DEFAULT_LIMIT) -> Page[T]:
    """Slice a fully materialized result list into one page."""
    page, limit = validate_pagination(page, limit)
    start = (page - 1) * limit
    return Page(data=list(items[start:start + limit]), **calculate_pagination(len(items), page, limit))
