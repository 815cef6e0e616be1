"""
Shared schema building blocks: camelCase wire format and response envelopes.
"""

import math
from typing import Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    """Envelope for operations that only report an outcome."""
    success: bool = True
    message: Optional[str] = None


class PaginatedResponse(MessageResponse):
    """Envelope metadata shared by every list endpoint."""
    count: int
    total: int
    total_pages: int
    current_page: int


def page_meta(count: int, total: int, page: int, limit: int) -> dict:
    """Build the pagination fields of a list envelope."""
    return {
        "count": count,
        "total": total,
        "total_pages": math.ceil(total / limit) if limit else 0,
        "current_page": page,
    }
