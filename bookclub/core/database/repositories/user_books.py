"""
User-book (shelf) repository.

The interesting part is ``update_user_book``: clients send any subset of
status, progress and completion date, and ``build_user_book_update`` turns
that subset into the SET clause of a single ``UPDATE ... RETURNING``
statement scoped to the owner of the row.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.books import Book
from ..entities.user_books import UserBook, UserBookStatus
from ..errors import (
    DuplicateRecordError,
    NoFieldsToUpdateError,
    RecordNotFoundError,
    is_unique_violation,
)
from ..schemas.user_books import BasicUserBookRead
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder
from .books import BookRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20


def build_user_book_update(changes: Mapping[str, Any], now: datetime) -> Dict[str, Any]:
    """Build the column values for a partial user-book update.

    Rules:
    - ``status`` is applied when present and not null.
    - ``completed_at`` is applied whenever the key is present; ``None`` clears it.
    - Moving to ``completed`` without a ``completed_at`` sets it to today.
    - Moving to ``reading`` sets ``started_at`` to today unless already set.
    - ``pages_read`` / ``percentage_read`` are applied when not null and
      stamp ``progress_updated_at``.
    - ``updated_at`` is always stamped.

    Args:
        changes: Fields sent by the client (unset fields must be absent)
        now: Timestamp used for every stamped column

    Returns:
        Mapping of column name to value or SQL expression

    Raises:
        NoFieldsToUpdateError: nothing in ``changes`` is updatable
    """
    values: Dict[str, Any] = {}
    today = now.date()

    status = changes.get("status")
    if status is not None:
        status = UserBookStatus(status)
        values["status"] = status.value

    if "completed_at" in changes:
        values["completed_at"] = changes["completed_at"]
    elif status is UserBookStatus.COMPLETED:
        values["completed_at"] = today

    if status is UserBookStatus.READING:
        values["started_at"] = func.coalesce(UserBook.started_at, today)

    if changes.get("pages_read") is not None:
        values["pages_read"] = changes["pages_read"]
        values["progress_updated_at"] = now

    if changes.get("percentage_read") is not None:
        values["percentage_read"] = changes["percentage_read"]
        values["progress_updated_at"] = now

    if not values:
        raise NoFieldsToUpdateError()

    values["updated_at"] = now
    return values


class UserBookRepository(BaseRepository[UserBook]):
    """Repository for user-book data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserBook)

    async def get_user_books(
        self,
        user_id: int,
        status: Optional[str] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> List[BasicUserBookRead]:
        """List a user's shelf, most recently updated first.

        Args:
            user_id: Owner of the shelf
            status: Optional status filter
            page: 1-based page (values below 1 fall back to 1)
            limit: Page size (values below 1 fall back to 20)

        Returns:
            Shelf entries with the full book embedded
        """
        page = page if page >= 1 else DEFAULT_PAGE
        limit = limit if limit >= 1 else DEFAULT_LIMIT

        stmt = select(UserBook).where(UserBook.user_id == user_id)
        stmt = QueryBuilder.apply_filters(stmt, UserBook, {"status": status})
        stmt = stmt.order_by(UserBook.updated_at.desc(), UserBook.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, QueryBuilder.page_to_offset(page, limit))

        result = await self.session.execute(stmt)
        user_books = list(result.scalars().all())
        books = await BookRepository(self.session).load_books(user_book.book_id for user_book in user_books)
        return [
            BasicUserBookRead(
                id=user_book.id,
                user_id=user_book.user_id,
                status=user_book.status,
                updated_at=user_book.updated_at,
                book=books.get(user_book.book_id),
            )
            for user_book in user_books
        ]

    async def get_user_book(self, user_id: int, user_book_id: int) -> Optional[UserBook]:
        """Get one of the user's shelf entries with fresh values from the database."""
        stmt = (
            select(UserBook)
            .where(UserBook.id == user_book_id, UserBook.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_user_book(self, user_id: int, book_id: int, status: str = UserBookStatus.WISHLIST.value) -> UserBook:
        """Put a book on a user's shelf.

        Raises:
            RecordNotFoundError: the book does not exist
            DuplicateRecordError: the book is already on the user's shelf
        """
        exists = await self.session.execute(select(Book.id).where(Book.id == book_id))
        if exists.scalar_one_or_none() is None:
            raise RecordNotFoundError(f"book {book_id} not found")

        now = utc_now()
        user_book = UserBook(
            user_id=user_id,
            book_id=book_id,
            status=UserBookStatus(status).value,
            created_at=now,
            updated_at=now,
        )
        if user_book.status == UserBookStatus.READING.value:
            user_book.started_at = now.date()
        elif user_book.status == UserBookStatus.COMPLETED.value:
            user_book.completed_at = now.date()

        self.session.add(user_book)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if is_unique_violation(exc):
                raise DuplicateRecordError("book_id", "book already on shelf") from exc
            raise
        await self.session.refresh(user_book)
        return user_book

    async def update_user_book(
        self,
        user_id: int,
        user_book_id: int,
        changes: Mapping[str, Any],
        now: Optional[datetime] = None,
    ) -> UserBook:
        """Apply a partial update to one of the user's shelf entries.

        Args:
            user_id: Owner; rows of other users are never touched
            user_book_id: Shelf entry to update
            changes: Fields sent by the client
            now: Reference timestamp (defaults to current UTC)

        Returns:
            The updated shelf entry

        Raises:
            NoFieldsToUpdateError: ``changes`` carries nothing to update
            RecordNotFoundError: no such entry for this user
        """
        values = build_user_book_update(changes, now or utc_now())
        stmt = (
            update(UserBook)
            .where(UserBook.id == user_book_id, UserBook.user_id == user_id)
            .values(**values)
            .returning(UserBook.id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            await self.session.rollback()
            raise RecordNotFoundError(f"user book {user_book_id} not found")
        await self.session.commit()
        logger.debug(f"Updated user book {user_book_id}: {sorted(values)}")

        user_book = await self.get_user_book(user_id, user_book_id)
        if user_book is None:
            raise RecordNotFoundError(f"user book {user_book_id} not found")
        return user_book

    async def delete_user_book(self, user_id: int, user_book_id: int) -> None:
        """Remove one of the user's shelf entries.

        Raises:
            RecordNotFoundError: no such entry for this user
        """
        stmt = (
            delete(UserBook)
            .where(UserBook.id == user_book_id, UserBook.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if not result.rowcount:
            await self.session.rollback()
            raise RecordNotFoundError(f"user book {user_book_id} not found")
        await self.session.commit()
