import pytest
from httpx import AsyncClient

from bookclub.server.core import constant

# Mark all tests in this module as async
pytestmark = pytest.mark.asyncio


async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_version(client: AsyncClient):
    response = await client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}


async def test_openapi_served_under_api_prefix(client: AsyncClient):
    response = await client.get("/api/v1/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/books/{book_id}" in paths
    assert "/user-books/{user_book_id}" in paths


async def test_health_ignores_authorization_header(client: AsyncClient):
    response = await client.get("/health", headers={"Authorization": "garbage"})
    assert response.status_code == 200
