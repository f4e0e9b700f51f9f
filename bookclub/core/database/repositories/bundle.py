"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, for easy injection into request handlers.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .books import BookRepository
from .chapters import ChapterRepository
from .comments import CommentRepository
from .tokens import TokenRepository
from .user_books import UserBookRepository
from .users import UserRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    users: UserRepository
    tokens: TokenRepository
    books: BookRepository
    chapters: ChapterRepository
    comments: CommentRepository
    user_books: UserBookRepository


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        users=UserRepository(session),
        tokens=TokenRepository(session),
        books=BookRepository(session),
        chapters=ChapterRepository(session),
        comments=CommentRepository(session),
        user_books=UserBookRepository(session),
    )
