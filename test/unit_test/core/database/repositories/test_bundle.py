"""Unit tests for the repository bundle."""

from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.core.database.repositories import (
    BookRepository,
    ChapterRepository,
    CommentRepository,
    TokenRepository,
    UserBookRepository,
    UserRepository,
)
from bookclub.core.database.repositories.bundle import SqlRepoBundle, build_sql_repos_from_session


async def test_bundle_shares_one_session(session: AsyncSession):
    repos = build_sql_repos_from_session(session=session)

    assert isinstance(repos, SqlRepoBundle)
    assert isinstance(repos.users, UserRepository)
    assert isinstance(repos.tokens, TokenRepository)
    assert isinstance(repos.books, BookRepository)
    assert isinstance(repos.chapters, ChapterRepository)
    assert isinstance(repos.comments, CommentRepository)
    assert isinstance(repos.user_books, UserBookRepository)
    assert {id(repo.session) for repo in vars(repos).values()} == {id(session)}
