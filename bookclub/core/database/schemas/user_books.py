"""
Schema models for user-book (shelf) API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..base import MAX_INT
from ..entities.user_books import UserBookStatus
from .books import BookRead


class UserBookRead(BaseModel):
    """Shelf entry with full reading progress."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    book_id: int
    status: str
    started_at: Optional[date] = None
    completed_at: Optional[date] = None
    pages_read: Optional[int] = None
    percentage_read: Optional[float] = None
    progress_updated_at: Optional[datetime] = None
    updated_at: datetime
    book: Optional[BookRead] = None


class BasicUserBookRead(BaseModel):
    """Shelf entry as listed on the user's shelf."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: str
    updated_at: datetime
    book: Optional[BookRead] = None


class UserBooksResponse(BaseModel):
    user_books: List[BasicUserBookRead]
    page: int
    limit: int


class UpdateUserBookRequest(BaseModel):
    """Partial update of a shelf entry.

    Only fields present in the request body are applied. ``completed_at``
    sent as ``null`` clears the completion date; ``null`` for any other field
    is treated as absent.
    """

    status: Optional[UserBookStatus] = None
    pages_read: Optional[int] = None
    percentage_read: Optional[float] = None
    completed_at: Optional[date] = None

    @field_validator("pages_read")
    @classmethod
    def _check_pages_read(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not 0 <= value <= MAX_INT:
            raise ValueError(f"pages_read must be between 0 and {MAX_INT}")
        return value

    @field_validator("percentage_read")
    @classmethod
    def _check_percentage_read(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not 0 <= value <= 100:
            raise ValueError("percentage_read must be between 0 and 100")
        return value

    def changes(self) -> dict:
        """Fields the client actually sent, keeping an explicit ``completed_at: null``."""
        return self.model_dump(exclude_unset=True)
