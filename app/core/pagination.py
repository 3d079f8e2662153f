"""
Page/limit pagination shared by the listing endpoints
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from app.core.exceptions import ValidationError


@dataclass(frozen=True)
class Pagination:
    """1-based page number and page size."""

    page: int = 1
    limit: int = 10

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError(
                detail="Page must be 1 or greater",
                field="page",
                value=self.page
            )
        if self.limit < 1:
            raise ValidationError(
                detail="Limit must be 1 or greater",
                field="limit",
                value=self.limit
            )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def take(self) -> int:
        return self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)

    def meta(self, total: int) -> Dict[str, Any]:
        return {
            "total": total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages(total),
        }
