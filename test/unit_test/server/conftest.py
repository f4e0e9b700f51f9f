from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.core.database.entities.users import UserRole


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client whose requests share the test session.

    ASGITransport does not send lifespan events, so the application never
    touches the configured database.
    """
    from bookclub.core.database import get_session
    from bookclub.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def reader(make_user):
    return await make_user(username="reader")


@pytest_asyncio.fixture
async def reader_headers(reader, auth_headers) -> dict:
    return await auth_headers(reader)


@pytest_asyncio.fixture
async def admin(make_user):
    return await make_user(username="librarian", role=UserRole.ADMIN)


@pytest_asyncio.fixture
async def admin_headers(admin, auth_headers) -> dict:
    return await auth_headers(admin)


@pytest.fixture
def create_book(client: AsyncClient, admin_headers: dict, book_payload):
    """Create a book through the API and return its JSON."""

    async def _create_book(**overrides) -> dict:
        response = await client.post("/books", json=book_payload(**overrides), headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_book
