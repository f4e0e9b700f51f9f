"""Fixtures for end-to-end tests against a real PostgreSQL server.

The server is started once per session with testcontainers. Every test
module here is skipped unless BOOKCLUB_ENABLE_POSTGRES_TESTS is true, since
Docker is required.
"""

from __future__ import annotations

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from testcontainers.postgres import PostgresContainer

from bookclub.core.database import Base, create_engine, create_sessionmaker
from bookclub.core.database import entities  # noqa: F401


@pytest.fixture(scope="session")
def postgres_container(test_config) -> Generator[PostgresContainer, None, None]:
    """Start a disposable PostgreSQL server for the test session."""
    if not test_config.enable_postgres_tests:
        pytest.skip("PostgreSQL tests disabled; set BOOKCLUB_ENABLE_POSTGRES_TESTS=true to run them")

    container = PostgresContainer(
        image=test_config.database.postgres_image,
        username="bookclub",
        password="bookclub123",
        dbname="bookclubapp_test",
        driver=None,
    )
    container.start()
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def postgres_url(postgres_container: PostgresContainer) -> str:
    """Connection URL of the container; ``create_engine`` switches it to asyncpg."""
    return postgres_container.get_connection_url()


@pytest_asyncio.fixture
async def postgres_engine(postgres_url: str):
    """Async engine with every table created, dropped again after the test."""
    engine = create_engine(postgres_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_session(postgres_engine) -> AsyncGenerator[AsyncSession, None]:
    async with create_sessionmaker(postgres_engine)() as session:
        yield session
