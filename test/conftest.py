from __future__ import annotations

import itertools
import os
from datetime import timedelta
from pathlib import Path
from typing import AsyncGenerator, Iterable

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

TEST_ROOT = Path(__file__).resolve().parent

# Load dotenv files early so test fixtures can read settings via os.getenv
load_dotenv(TEST_ROOT / ".env", override=False)

# Point the application at SQLite and keep monitoring off before anything imports it
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["LOGFIRE_ENABLED"] = "false"

from bookclub.core.database import Base, create_sessionmaker  # noqa: E402
from bookclub.core.database import entities  # noqa: E402,F401
from bookclub.core.database.entities.users import User, UserRole  # noqa: E402
from bookclub.core.database.repositories.tokens import TokenRepository  # noqa: E402
from bookclub.core.database.repositories.users import UserRepository  # noqa: E402
from bookclub.core.security.passwords import hash_password  # noqa: E402
from bookclub.core.security.tokens import SCOPE_AUTHENTICATION  # noqa: E402

DEFAULT_PASSWORD = "correct-horse-battery"


class TestDatabaseConfig(BaseModel):
    """Database configuration container for tests."""

    url: str = Field(
        default=TEST_DATABASE_URL,
        description="Test database connection URL (defaults to in-memory SQLite)",
    )
    postgres_image: str = Field(
        default="postgres:16-alpine",
        description="Docker image used for PostgreSQL end-to-end tests",
    )


class TestSettings(BaseSettings):
    """
    Test environment settings model.

    Bound from environment variables and test/.env. Nested properties use a
    double underscore, e.g. DATABASE__POSTGRES_IMAGE.
    """

    __test__ = False

    model_config = SettingsConfigDict(
        env_file=str(TEST_ROOT / ".env"),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    database: TestDatabaseConfig = Field(default_factory=TestDatabaseConfig)
    enable_postgres_tests: bool = Field(
        default=False,
        description="Enable PostgreSQL-based tests (requires Docker)",
        validation_alias=AliasChoices("BOOKCLUB_ENABLE_POSTGRES_TESTS", "enable_postgres_tests"),
    )


test_settings = TestSettings()


@pytest.fixture(scope="session")
def test_config():
    """Fixture providing test configuration from Pydantic settings model.

    Returns:
        TestSettings: Test configuration with all environment variables loaded
    """
    return test_settings


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://test",
        "http://localhost",
        "http://127.0.0.1",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory SQLite database with every table created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with create_sessionmaker(test_engine)() as session:
        yield session


@pytest.fixture
def default_password() -> str:
    return DEFAULT_PASSWORD


@pytest.fixture
def make_user(session: AsyncSession):
    """Factory creating persisted users: ``await make_user(username=..., role=...)``."""
    counter = itertools.count(1)

    async def _make_user(
        username: str | None = None,
        email: str | None = None,
        role: UserRole = UserRole.USER,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        username = username or f"reader{next(counter)}"
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            role=role.value,
            password_hash=hash_password(password),
        )
        return await UserRepository(session).create(user)

    return _make_user


@pytest.fixture
def auth_headers(session: AsyncSession):
    """Factory issuing a token for a user and returning the matching headers."""

    async def _auth_headers(user: User, ttl: timedelta = timedelta(hours=1)) -> dict:
        token = await TokenRepository(session).create_new_token(user.id, ttl, SCOPE_AUTHENTICATION)
        return {"Authorization": f"Bearer {token.plaintext}"}

    return _auth_headers


@pytest.fixture
def book_payload():
    """Factory for a valid book request body."""
    counter = itertools.count(1)

    def _book_payload(**overrides) -> dict:
        n = next(counter)
        payload = {
            "title": f"The Test Book {n}",
            "authors": ["Ada Writer", "Bo Coauthor"],
            "publisher": "Acme Press",
            "published_date": "2020-05-17",
            "description": "A book used in tests.",
            "page_count": 320,
            "isbn_13": f"978000000{n:04d}",
            "isbn_10": f"00000{n:05d}",
            "book_images": {"thumbnail_url": f"https://img.example.com/{n}/thumb.jpg"},
            "chapters": [
                {"number": 1, "title": "Beginnings"},
                {"number": 2, "title": "Middles"},
            ],
        }
        payload.update(overrides)
        return payload

    return _book_payload
