"""
Chapter repository.

Chapters are written together with their book (see ``books``); this
repository only reads them.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.chapters import Chapter
from .base import BaseRepository


class ChapterRepository(BaseRepository[Chapter]):
    """Repository for chapter data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Chapter)

    async def get_chapter_by_id(self, chapter_id: int) -> Optional[Chapter]:
        return await self.get_by_id(chapter_id)

    async def list_for_book(self, book_id: int) -> List[Chapter]:
        """Chapters of a book ordered by number."""
        stmt = select(Chapter).where(Chapter.book_id == book_id).order_by(Chapter.number)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
