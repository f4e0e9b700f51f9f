"""
Database entity models.

This package contains all database entity models organized by business domain.
Importing it registers every table on the shared ``Base.metadata``.

Modules:
- users: Accounts and roles
- tokens: Hashed bearer tokens
- books: Books with publishers, authors and cover images
- chapters: Chapters of a book
- comments: Reader comments on chapters
- user_books: A user's shelf entries and reading progress
"""

from . import books, chapters, comments, tokens, user_books, users
from .books import Author, Book, BookAuthorLink, BookImage, Publisher
from .chapters import Chapter
from .comments import Comment
from .tokens import Token
from .user_books import UserBook, UserBookStatus
from .users import User, UserRole

__all__ = [
    "Author",
    "Book",
    "BookAuthorLink",
    "BookImage",
    "Chapter",
    "Comment",
    "Publisher",
    "Token",
    "User",
    "UserBook",
    "UserBookStatus",
    "UserRole",
    "books",
    "chapters",
    "comments",
    "tokens",
    "user_books",
    "users",
]
