"""
Database repository layer using SQLModel.

Each module provides async data access operations for one business area.
Repositories raise the exceptions in ``bookclub.core.database.errors`` rather
than driver errors.

Modules:
- base: BaseRepository and QueryBuilder utilities
- users: Accounts and token lookup
- tokens: Token issue and revocation
- books: Books with publisher, authors, images and chapters
- chapters: Chapter reads
- comments: Chapter comments
- user_books: Shelf entries and the partial progress update
- bundle: SqlRepoBundle for dependency injection
"""

from .books import BookRepository
from .bundle import SqlRepoBundle, build_sql_repos_from_session
from .chapters import ChapterRepository
from .comments import CommentRepository
from .tokens import TokenRepository
from .user_books import UserBookRepository, build_user_book_update
from .users import UserRepository

__all__ = [
    "BookRepository",
    "ChapterRepository",
    "CommentRepository",
    "SqlRepoBundle",
    "TokenRepository",
    "UserBookRepository",
    "UserRepository",
    "build_sql_repos_from_session",
    "build_user_book_update",
]
