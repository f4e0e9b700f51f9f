"""
Schema models for book API requests and responses.

A book is read back as one document: publisher and authors by name, cover
image URLs and the ordered list of chapters.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..base import MAX_INT


class BookImages(BaseModel):
    """Cover image URLs of a book."""

    model_config = ConfigDict(from_attributes=True)

    thumbnail_url: Optional[str] = None
    small_url: Optional[str] = None
    medium_url: Optional[str] = None
    large_url: Optional[str] = None


class ChapterIn(BaseModel):
    """Chapter as submitted with a book."""

    number: int = Field(ge=1, le=MAX_INT, description="Chapter number, unique within the book")
    title: str = Field(min_length=1)


class ChapterRead(BaseModel):
    """Schema for reading a chapter."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int
    number: int
    title: str


class BookBase(BaseModel):
    """Base fields for book schema."""

    title: str = Field(min_length=1, description="Book title")
    authors: List[str] = Field(default_factory=list, description="Author names in display order")
    publisher: str = Field(min_length=1, description="Publisher name")
    published_date: Optional[date] = Field(default=None, description="Publication date (YYYY-MM-DD)")
    description: Optional[str] = None
    page_count: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    isbn_13: str = Field(min_length=1, max_length=17, description="ISBN-13, unique per book")
    isbn_10: Optional[str] = Field(default=None, max_length=13)
    book_images: BookImages = Field(default_factory=BookImages)


class BookCreate(BookBase):
    """Schema for creating or replacing a book."""

    chapters: List[ChapterIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_chapter_numbers(self) -> "BookCreate":
        numbers = [chapter.number for chapter in self.chapters]
        if len(numbers) != len(set(numbers)):
            raise ValueError("chapter numbers must be unique")
        return self


class BookRead(BookBase):
    """Schema for reading a book."""

    id: int
    chapters: List[ChapterRead] = Field(default_factory=list)


class PaginatedBooksResponse(BaseModel):
    books: List[BookRead]
    page: int
    limit: int
    total_items: int
    total_pages: int
