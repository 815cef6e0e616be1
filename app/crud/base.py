"""
Shared query helpers for the repository modules.
"""

from typing import Any, List, Tuple
from sqlalchemy.orm import Query


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], int]:
    """
    Apply offset/limit pagination to a query.

    Args:
        query: Filtered and ordered query
        page: 1-based page number
        limit: Page size

    Returns:
        Tuple of (items on the requested page, total matching rows)
    """
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total
