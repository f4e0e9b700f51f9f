"""
Database schema models for API requests and responses.

This package contains Pydantic-based schema models for API serialization/deserialization.
These schemas are separate from entity models to allow independent evolution of API contracts
and database representations.
"""

from . import books, comments, tokens, user_books, users
from .books import BookCreate, BookImages, BookRead, ChapterIn, ChapterRead, PaginatedBooksResponse
from .comments import CommentCreate, CommentRead, CommentUser, PaginatedCommentsResponse
from .tokens import AuthToken, CreateTokenRequest, TokenResponse
from .user_books import BasicUserBookRead, UpdateUserBookRequest, UserBookRead, UserBooksResponse
from .users import RegisterUserRequest, UpdateProfileRequest, UserRead

__all__ = [
    "AuthToken",
    "BasicUserBookRead",
    "BookCreate",
    "BookImages",
    "BookRead",
    "ChapterIn",
    "ChapterRead",
    "CommentCreate",
    "CommentRead",
    "CommentUser",
    "CreateTokenRequest",
    "PaginatedBooksResponse",
    "PaginatedCommentsResponse",
    "RegisterUserRequest",
    "TokenResponse",
    "UpdateProfileRequest",
    "UpdateUserBookRequest",
    "UserBookRead",
    "UserBooksResponse",
    "UserRead",
    "books",
    "comments",
    "tokens",
    "user_books",
    "users",
]
