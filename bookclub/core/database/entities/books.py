"""
Book entity models.

A book belongs to one publisher, has an ordered list of authors through the
``book_authors`` link table, one row of cover image URLs and any number of
chapters (see ``chapters``). Publishers and authors are shared between books
and are looked up by name.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class Publisher(Base, table=True):
    """Table: publishers"""

    __tablename__ = "publishers"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, nullable=False)


class Author(Base, table=True):
    """Table: authors"""

    __tablename__ = "authors"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, nullable=False)


class BookAuthorLink(Base, table=True):
    """Author of a book.

    ``position`` keeps the authors in the order they were submitted.

    Table: book_authors
    """

    __tablename__ = "book_authors"
    __table_args__ = ({"extend_existing": True},)

    book_id: int = Field(foreign_key="books.id", ondelete="CASCADE", primary_key=True)
    author_id: int = Field(foreign_key="authors.id", ondelete="CASCADE", primary_key=True)
    position: int = Field(default=0, nullable=False)


class BookBase(Base):
    """Base fields for book."""

    title: str = Field(nullable=False, description="Book title")
    published_date: Optional[date] = Field(default=None, description="Publication date")
    description: Optional[str] = Field(default=None, sa_type=Text, description="Blurb")
    page_count: Optional[int] = Field(default=None, description="Number of pages")
    isbn_13: str = Field(unique=True, nullable=False, description="ISBN-13, unique per book")
    isbn_10: Optional[str] = Field(default=None, description="ISBN-10")


class Book(BookBase, table=True):
    """Catalogue entry.

    Table: books
    """

    __tablename__ = "books"
    __table_args__ = ({"extend_existing": True},)

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    publisher_id: int = Field(foreign_key="publishers.id", index=True, nullable=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title={self.title}, isbn_13={self.isbn_13})"


class BookImage(Base, table=True):
    """Cover image URLs of a book.

    Table: book_images
    """

    __tablename__ = "book_images"
    __table_args__ = ({"extend_existing": True},)

    book_id: int = Field(foreign_key="books.id", ondelete="CASCADE", primary_key=True)
    thumbnail_url: Optional[str] = Field(default=None)
    small_url: Optional[str] = Field(default=None)
    medium_url: Optional[str] = Field(default=None)
    large_url: Optional[str] = Field(default=None)
