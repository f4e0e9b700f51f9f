"""
Pagination Dependency.

``page`` starts at 1 and ``limit`` is capped at 100. Out-of-range values fail
request validation and are answered with 400.
"""

import math
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Query

from bookclub.core.database.base import MAX_INT

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total_items: int) -> int:
        return math.ceil(total_items / self.limit) if total_items else 0


def get_pagination(
    page: int = Query(1, ge=1, le=MAX_INT, description="1-based page number"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Page size"),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)


PaginationDep = Annotated[PaginationParams, Depends(get_pagination)]
