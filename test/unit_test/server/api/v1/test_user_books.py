"""API tests for the reading shelf."""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def shelve(client: AsyncClient):
    async def _shelve(book_id: int, headers: dict, status: str | None = None) -> dict:
        params = {"book_id": book_id}
        if status is not None:
            params["status"] = status
        response = await client.post("/user-books", params=params, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _shelve


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class TestAddUserBook:
    async def test_defaults_to_wishlist(self, client: AsyncClient, reader, reader_headers, create_book):
        book = await create_book()

        response = await client.post("/user-books", params={"book_id": book["id"]}, headers=reader_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == reader.id
        assert body["book_id"] == book["id"]
        assert body["status"] == "wishlist"
        assert body["started_at"] is None

    async def test_start_reading(self, client: AsyncClient, reader_headers, create_book, shelve):
        book = await create_book()

        body = await shelve(book["id"], reader_headers, status="reading")

        assert body["status"] == "reading"
        assert body["started_at"] == _today()

    async def test_already_on_shelf(self, client: AsyncClient, reader_headers, create_book, shelve):
        book = await create_book()
        await shelve(book["id"], reader_headers)

        response = await client.post("/user-books", params={"book_id": book["id"]}, headers=reader_headers)

        assert response.status_code == 409
        assert response.json()["detail"] == "book already on shelf"

    async def test_unknown_book(self, client: AsyncClient, reader_headers):
        response = await client.post("/user-books", params={"book_id": 999}, headers=reader_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "book not found"

    @pytest.mark.parametrize(
        "params",
        [{}, {"book_id": "abc"}, {"book_id": 0}, {"book_id": 2**31}, {"book_id": 2**64}, {"book_id": 1, "status": "lost"}],
    )
    async def test_invalid_query(self, client: AsyncClient, reader_headers, params):
        response = await client.post("/user-books", params=params, headers=reader_headers)

        assert response.status_code == 400

    async def test_requires_login(self, client: AsyncClient, create_book):
        book = await create_book()

        response = await client.post("/user-books", params={"book_id": book["id"]})

        assert response.status_code == 401


class TestListUserBooks:
    async def test_lists_own_shelf_with_books(
        self, client: AsyncClient, reader_headers, admin_headers, create_book, shelve
    ):
        mine = await shelve((await create_book())["id"], reader_headers)
        await shelve((await create_book())["id"], admin_headers)

        response = await client.get("/user-books", headers=reader_headers)

        assert response.status_code == 200
        body = response.json()
        assert [entry["id"] for entry in body["user_books"]] == [mine["id"]]
        assert body["user_books"][0]["book"]["id"] == mine["book_id"]
        assert body["page"] == 1
        assert body["limit"] == 20

    async def test_status_filter(self, client: AsyncClient, reader_headers, create_book, shelve):
        await shelve((await create_book())["id"], reader_headers, status="wishlist")
        reading = await shelve((await create_book())["id"], reader_headers, status="reading")

        response = await client.get("/user-books", params={"status": "reading"}, headers=reader_headers)

        assert [entry["id"] for entry in response.json()["user_books"]] == [reading["id"]]

    async def test_invalid_status_filter(self, client: AsyncClient, reader_headers):
        response = await client.get("/user-books", params={"status": "paused"}, headers=reader_headers)

        assert response.status_code == 400

    async def test_requires_login(self, client: AsyncClient):
        response = await client.get("/user-books")

        assert response.status_code == 401


class TestUpdateUserBook:
    async def test_progress(self, client: AsyncClient, reader_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers, status="reading")

        response = await client.patch(
            f"/user-books/{entry['id']}", json={"pages_read": 120, "percentage_read": 37.5}, headers=reader_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["pages_read"] == 120
        assert body["percentage_read"] == 37.5
        assert body["progress_updated_at"] is not None
        assert body["status"] == "reading"

    async def test_complete_stamps_completed_at(self, client: AsyncClient, reader_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers, status="reading")

        response = await client.patch(
            f"/user-books/{entry['id']}", json={"status": "completed"}, headers=reader_headers
        )

        assert response.json()["status"] == "completed"
        assert response.json()["completed_at"] == _today()

    async def test_explicit_completed_at(self, client: AsyncClient, reader_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers)

        response = await client.patch(
            f"/user-books/{entry['id']}",
            json={"status": "completed", "completed_at": "2026-01-31"},
            headers=reader_headers,
        )

        assert response.json()["completed_at"] == "2026-01-31"

    async def test_null_completed_at_clears(self, client: AsyncClient, reader_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers, status="completed")
        assert entry["completed_at"] is not None

        response = await client.patch(f"/user-books/{entry['id']}", json={"completed_at": None}, headers=reader_headers)

        assert response.status_code == 200
        assert response.json()["completed_at"] is None

    async def test_back_to_reading_keeps_started_at(self, client: AsyncClient, reader_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers, status="reading")
        await client.patch(f"/user-books/{entry['id']}", json={"status": "wishlist"}, headers=reader_headers)

        response = await client.patch(f"/user-books/{entry['id']}", json={"status": "reading"}, headers=reader_headers)

        assert response.json()["started_at"] == entry["started_at"]

    @pytest.mark.parametrize("body", [{}, {"status": None}, {"pages_read": None}])
    async def test_no_fields(self, client: AsyncClient, reader_headers, create_book, shelve, body):
        entry = await shelve((await create_book())["id"], reader_headers)

        response = await client.patch(f"/user-books/{entry['id']}", json=body, headers=reader_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "no fields to update"

    @pytest.mark.parametrize(
        "body",
        [
            {"pages_read": -1},
            {"pages_read": 2**31},
            {"pages_read": 2**64},
            {"percentage_read": 100.5},
            {"percentage_read": -0.1},
            {"status": "paused"},
        ],
    )
    async def test_invalid_values(self, client: AsyncClient, reader_headers, create_book, shelve, body):
        entry = await shelve((await create_book())["id"], reader_headers)

        response = await client.patch(f"/user-books/{entry['id']}", json=body, headers=reader_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "invalid request"

    async def test_other_users_entry(self, client: AsyncClient, reader_headers, admin_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers)

        response = await client.patch(f"/user-books/{entry['id']}", json={"pages_read": 3}, headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "user book not found"

    async def test_unknown_entry(self, client: AsyncClient, reader_headers):
        response = await client.patch("/user-books/999", json={"pages_read": 3}, headers=reader_headers)

        assert response.status_code == 404

    @pytest.mark.parametrize("user_book_id", ["0", "2147483648", "99999999999999999999"])
    async def test_invalid_entry_id(self, client: AsyncClient, reader_headers, user_book_id):
        response = await client.patch(f"/user-books/{user_book_id}", json={"pages_read": 3}, headers=reader_headers)

        assert response.status_code == 400


class TestDeleteUserBook:
    async def test_delete(self, client: AsyncClient, reader_headers, create_book, shelve):
        entry = await shelve((await create_book())["id"], reader_headers)

        response = await client.delete(f"/user-books/{entry['id']}", headers=reader_headers)

        assert response.status_code == 204
        listing = await client.get("/user-books", headers=reader_headers)
        assert listing.json()["user_books"] == []

    async def test_delete_other_users_entry(
        self, client: AsyncClient, reader_headers, admin_headers, create_book, shelve
    ):
        entry = await shelve((await create_book())["id"], reader_headers)

        response = await client.delete(f"/user-books/{entry['id']}", headers=admin_headers)

        assert response.status_code == 404

    async def test_delete_requires_login(self, client: AsyncClient):
        response = await client.delete("/user-books/1")

        assert response.status_code == 401

    async def test_delete_oversized_id(self, client: AsyncClient, reader_headers):
        response = await client.delete(f"/user-books/{2**64}", headers=reader_headers)

        assert response.status_code == 400
