"""Unit tests for the authentication dependencies."""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from bookclub.core.database.entities.users import User, UserRole
from bookclub.core.database.repositories.bundle import build_sql_repos_from_session
from bookclub.server.services.auth import get_current_user, parse_bearer_token, require_admin, require_user


class TestParseBearerToken:
    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer ABC123", "ABC123"),
            ("bearer ABC123", "ABC123"),
            ("BEARER   ABC123", "ABC123"),
            ("Bearer", None),
            ("Basic dXNlcjpwYXNz", None),
            ("Bearer ABC 123", None),
            ("ABC123", None),
        ],
    )
    def test_parse(self, header, expected):
        assert parse_bearer_token(header) == expected


class TestGetCurrentUser:
    async def test_no_header_is_anonymous(self, session):
        repos = build_sql_repos_from_session(session=session)

        assert await get_current_user(repos, None) is None

    async def test_malformed_header(self, session):
        repos = build_sql_repos_from_session(session=session)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, "Token abc")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "invalid authorization header"
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    async def test_unknown_token(self, session):
        repos = build_sql_repos_from_session(session=session)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, "Bearer UNKNOWNTOKEN")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "invalid token"

    async def test_expired_token(self, session, make_user, auth_headers):
        user = await make_user()
        headers = await auth_headers(user, ttl=timedelta(seconds=-1))
        repos = build_sql_repos_from_session(session=session)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, headers["Authorization"])

        assert exc_info.value.detail == "invalid token"

    async def test_valid_token(self, session, make_user, auth_headers):
        user = await make_user()
        headers = await auth_headers(user)
        repos = build_sql_repos_from_session(session=session)

        current = await get_current_user(repos, headers["Authorization"])

        assert current is not None
        assert current.id == user.id


class TestGuards:
    async def test_require_user_rejects_anonymous(self):
        with pytest.raises(HTTPException) as exc_info:
            await require_user(None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "you must be logged in"

    async def test_require_user_passes_user_through(self):
        user = User(id=1, username="u", email="u@example.com", password_hash="x")

        assert await require_user(user) is user

    async def test_require_admin_rejects_regular_user(self):
        user = User(id=1, username="u", email="u@example.com", password_hash="x", role=UserRole.USER.value)

        with pytest.raises(HTTPException) as exc_info:
            await require_admin(user)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "admin privileges required"

    async def test_require_admin_accepts_admin(self):
        admin = User(id=2, username="a", email="a@example.com", password_hash="x", role=UserRole.ADMIN.value)

        assert await require_admin(admin) is admin
