"""
User-book entity model.

A user-book is a book on a user's shelf together with the reading status and
progress the user reported for it. Each user can shelve a given book once.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, String, UniqueConstraint
from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class UserBookStatus(str, Enum):
    """Reading status of a shelved book."""

    WISHLIST = "wishlist"
    READING = "reading"
    COMPLETED = "completed"


class UserBook(Base, table=True):
    """Shelf entry with reading progress.

    Table: user_books
    """

    __tablename__ = "user_books"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_user_books_user_id_book_id"),
        CheckConstraint("status IN ('wishlist', 'reading', 'completed')", name="ck_user_books_status"),
        {"extend_existing": True},
    )

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True, nullable=False)
    book_id: int = Field(foreign_key="books.id", ondelete="CASCADE", index=True, nullable=False)
    status: str = Field(default=UserBookStatus.WISHLIST.value, sa_type=String(16), nullable=False)

    # Progress
    started_at: Optional[date] = Field(default=None)
    completed_at: Optional[date] = Field(default=None)
    pages_read: Optional[int] = Field(default=None)
    percentage_read: Optional[float] = Field(default=None)
    progress_updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"UserBook(id={self.id}, user_id={self.user_id}, book_id={self.book_id}, status={self.status})"
