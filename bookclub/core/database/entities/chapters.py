"""
Chapter entity model.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base


class Chapter(Base, table=True):
    """Numbered chapter of a book.

    Table: chapters
    """

    __tablename__ = "chapters"
    __table_args__ = (
        UniqueConstraint("book_id", "number", name="uq_chapters_book_id_number"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    book_id: int = Field(foreign_key="books.id", ondelete="CASCADE", index=True, nullable=False)
    number: int = Field(nullable=False, description="Chapter number within the book")
    title: str = Field(nullable=False, description="Chapter title")

    def __repr__(self) -> str:
        return f"Chapter(id={self.id}, book_id={self.book_id}, number={self.number})"
