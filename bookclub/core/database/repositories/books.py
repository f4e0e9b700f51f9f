"""
Book repository.

Books are written as one unit: the book row, its publisher, authors, cover
images and chapters are inserted (or replaced) inside a single transaction
and any failure rolls the whole write back. Reads assemble the same unit into
a ``BookRead`` document with a fixed number of queries per page of books.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, NoReturn, Optional, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.books import Author, Book, BookAuthorLink, BookImage, Publisher
from ..entities.chapters import Chapter
from ..entities.comments import Comment
from ..entities.user_books import UserBook
from ..errors import DuplicateRecordError, RecordNotFoundError, duplicate_field, is_unique_violation
from ..schemas.books import BookCreate, BookImages, BookRead, ChapterRead
from .base import BaseRepository, QueryBuilder

logger = logging.getLogger(__name__)

# Publisher and author names collide only when two writers create the same one
_UNIQUE_FIELDS = ("isbn_13", "number", "name")


class BookRepository(BaseRepository[Book]):
    """Repository for book data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Book)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add_book(self, data: BookCreate) -> BookRead:
        """Insert a book with its publisher, authors, images and chapters.

        Args:
            data: Book document to store

        Returns:
            The stored book as read back from the database

        Raises:
            DuplicateRecordError: ISBN-13 already exists
        """
        try:
            publisher_id = await self._get_or_create_publisher(data.publisher)
            book = Book(
                title=data.title,
                publisher_id=publisher_id,
                published_date=data.published_date,
                description=data.description,
                page_count=data.page_count,
                isbn_13=data.isbn_13,
                isbn_10=data.isbn_10,
            )
            self.session.add(book)
            await self.session.flush()
            book_id = book.id
            await self._link_authors(book_id, data.authors)
            self.session.add(BookImage(book_id=book_id, **data.book_images.model_dump()))
            for chapter in data.chapters:
                self.session.add(Chapter(book_id=book_id, number=chapter.number, title=chapter.title))
            await self.session.commit()
        except IntegrityError as exc:
            await self._rollback_integrity_error(exc)
        except Exception:
            await self.session.rollback()
            raise

        logger.debug(f"Added book {book_id} ({data.isbn_13})")
        return await self._reload(book_id)

    async def update_book(self, book_id: int, data: BookCreate) -> BookRead:
        """Replace a book document.

        Scalar fields, publisher, authors and images are overwritten. Chapters
        are matched by number: existing numbers keep their id (and comments)
        with the new title, new numbers are inserted and numbers missing from
        ``data`` are removed together with their comments.

        Raises:
            RecordNotFoundError: no book with ``book_id``
            DuplicateRecordError: ISBN-13 already used by another book
        """
        try:
            book = await self.get_by_id(book_id)
            if book is None:
                raise RecordNotFoundError(f"book {book_id} not found")

            book.title = data.title
            book.publisher_id = await self._get_or_create_publisher(data.publisher)
            book.published_date = data.published_date
            book.description = data.description
            book.page_count = data.page_count
            book.isbn_13 = data.isbn_13
            book.isbn_10 = data.isbn_10
            self.session.add(book)

            await self._relink_authors(book_id, data.authors)
            await self._replace_images(book_id, data.book_images)
            await self._replace_chapters(book_id, data)
            await self.session.commit()
        except IntegrityError as exc:
            await self._rollback_integrity_error(exc)
        except Exception:
            await self.session.rollback()
            raise

        return await self._reload(book_id)

    async def delete_book_by_id(self, book_id: int) -> None:
        """Delete a book and everything that hangs off it.

        Raises:
            RecordNotFoundError: no book with ``book_id``
        """
        exists = await self.session.execute(select(Book.id).where(Book.id == book_id))
        if exists.scalar_one_or_none() is None:
            raise RecordNotFoundError(f"book {book_id} not found")

        chapter_ids = select(Chapter.id).where(Chapter.book_id == book_id)
        statements = [
            delete(Comment).where(Comment.chapter_id.in_(chapter_ids)),
            delete(Chapter).where(Chapter.book_id == book_id),
            delete(BookImage).where(BookImage.book_id == book_id),
            delete(BookAuthorLink).where(BookAuthorLink.book_id == book_id),
            delete(UserBook).where(UserBook.book_id == book_id),
            delete(Book).where(Book.id == book_id),
        ]
        try:
            for stmt in statements:
                await self.session.execute(stmt.execution_options(synchronize_session=False))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.debug(f"Deleted book {book_id}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_book_by_id(self, book_id: int) -> Optional[BookRead]:
        """Get a book document by id, or None if it does not exist."""
        books = await self.load_books([book_id])
        return books.get(book_id)

    async def get_all_books(self, page: int, limit: int) -> Tuple[List[BookRead], int]:
        """List books ordered by id.

        Args:
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (books on the page, total number of books)
        """
        total = await self.count(select(Book.id))
        stmt = select(Book, Publisher.name).join(Publisher, Publisher.id == Book.publisher_id).order_by(Book.id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, QueryBuilder.page_to_offset(page, limit))
        result = await self.session.execute(stmt)
        rows = result.all()
        documents = await self._assemble([(book, publisher) for book, publisher in rows])
        return [documents[book.id] for book, _ in rows], total

    async def load_books(self, book_ids: Iterable[int]) -> Dict[int, BookRead]:
        """Load book documents for the given ids.

        Ids that do not exist are absent from the returned mapping.
        """
        ids = list(dict.fromkeys(book_ids))
        if not ids:
            return {}
        stmt = select(Book, Publisher.name).join(Publisher, Publisher.id == Book.publisher_id).where(Book.id.in_(ids))
        result = await self.session.execute(stmt)
        return await self._assemble([(book, publisher) for book, publisher in result.all()])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _assemble(self, rows: Sequence[Tuple[Book, str]]) -> Dict[int, BookRead]:
        ids = [book.id for book, _ in rows]
        if not ids:
            return {}

        authors: Dict[int, List[str]] = defaultdict(list)
        author_rows = await self.session.execute(
            select(BookAuthorLink.book_id, Author.name)
            .join(Author, Author.id == BookAuthorLink.author_id)
            .where(BookAuthorLink.book_id.in_(ids))
            .order_by(BookAuthorLink.book_id, BookAuthorLink.position)
        )
        for book_id, name in author_rows.all():
            authors[book_id].append(name)

        image_rows = await self.session.execute(select(BookImage).where(BookImage.book_id.in_(ids)))
        images = {image.book_id: BookImages.model_validate(image) for image in image_rows.scalars().all()}

        chapters: Dict[int, List[ChapterRead]] = defaultdict(list)
        chapter_rows = await self.session.execute(
            select(Chapter).where(Chapter.book_id.in_(ids)).order_by(Chapter.book_id, Chapter.number)
        )
        for chapter in chapter_rows.scalars().all():
            chapters[chapter.book_id].append(ChapterRead.model_validate(chapter))

        return {
            book.id: BookRead(
                id=book.id,
                title=book.title,
                authors=authors.get(book.id, []),
                publisher=publisher,
                published_date=book.published_date,
                description=book.description,
                page_count=book.page_count,
                isbn_13=book.isbn_13,
                isbn_10=book.isbn_10,
                book_images=images.get(book.id, BookImages()),
                chapters=chapters.get(book.id, []),
            )
            for book, publisher in rows
        }

    async def _get_or_create_publisher(self, name: str) -> int:
        result = await self.session.execute(select(Publisher.id).where(Publisher.name == name))
        publisher_id = result.scalar_one_or_none()
        if publisher_id is not None:
            return publisher_id
        publisher = Publisher(name=name)
        self.session.add(publisher)
        await self.session.flush()
        return publisher.id

    async def _get_or_create_author(self, name: str) -> int:
        result = await self.session.execute(select(Author.id).where(Author.name == name))
        author_id = result.scalar_one_or_none()
        if author_id is not None:
            return author_id
        author = Author(name=name)
        self.session.add(author)
        await self.session.flush()
        return author.id

    async def _link_authors(self, book_id: int, names: Sequence[str]) -> None:
        # Repeated names link once, at their first position
        for position, name in enumerate(dict.fromkeys(names)):
            author_id = await self._get_or_create_author(name)
            self.session.add(BookAuthorLink(book_id=book_id, author_id=author_id, position=position))
        await self.session.flush()

    async def _relink_authors(self, book_id: int, names: Sequence[str]) -> None:
        result = await self.session.execute(select(BookAuthorLink).where(BookAuthorLink.book_id == book_id))
        existing = {link.author_id: link for link in result.scalars().all()}
        wanted: Dict[int, int] = {}
        for position, name in enumerate(dict.fromkeys(names)):
            wanted[await self._get_or_create_author(name)] = position

        for author_id, link in existing.items():
            if author_id not in wanted:
                await self.session.delete(link)
        for author_id, position in wanted.items():
            link = existing.get(author_id)
            if link is None:
                self.session.add(BookAuthorLink(book_id=book_id, author_id=author_id, position=position))
            else:
                link.position = position
                self.session.add(link)
        await self.session.flush()

    async def _replace_images(self, book_id: int, images: BookImages) -> None:
        image = await self.session.get(BookImage, book_id)
        if image is None:
            image = BookImage(book_id=book_id)
        for field, value in images.model_dump().items():
            setattr(image, field, value)
        self.session.add(image)
        await self.session.flush()

    async def _replace_chapters(self, book_id: int, data: BookCreate) -> None:
        result = await self.session.execute(select(Chapter).where(Chapter.book_id == book_id))
        existing = {chapter.number: chapter for chapter in result.scalars().all()}
        wanted = {chapter.number: chapter for chapter in data.chapters}

        removed = [chapter.id for number, chapter in existing.items() if number not in wanted]
        if removed:
            await self.session.execute(
                delete(Comment).where(Comment.chapter_id.in_(removed)).execution_options(synchronize_session=False)
            )
            for number, chapter in existing.items():
                if number not in wanted:
                    await self.session.delete(chapter)

        for number, chapter_in in wanted.items():
            chapter = existing.get(number)
            if chapter is None:
                self.session.add(Chapter(book_id=book_id, number=number, title=chapter_in.title))
            else:
                chapter.title = chapter_in.title
                self.session.add(chapter)
        await self.session.flush()

    async def _reload(self, book_id: int) -> BookRead:
        stored = await self.get_book_by_id(book_id)
        if stored is None:
            raise RecordNotFoundError(f"book {book_id} not found")
        return stored

    async def _rollback_integrity_error(self, exc: IntegrityError) -> NoReturn:
        await self.session.rollback()
        if is_unique_violation(exc):
            raise DuplicateRecordError(duplicate_field(exc, _UNIQUE_FIELDS)) from exc
        raise exc
