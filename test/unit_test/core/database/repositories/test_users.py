"""Unit tests for UserRepository against in-memory SQLite."""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.core.database.entities.users import User, UserRole
from bookclub.core.database.errors import DuplicateRecordError, RecordNotFoundError
from bookclub.core.database.repositories.tokens import TokenRepository
from bookclub.core.database.repositories.users import UserRepository
from bookclub.core.database.utils import utc_now
from bookclub.core.security.tokens import SCOPE_AUTHENTICATION

pytestmark = pytest.mark.asyncio


@pytest.fixture
def repo(session: AsyncSession) -> UserRepository:
    return UserRepository(session)


def _user(username: str, email: str | None = None) -> User:
    return User(username=username, email=email or f"{username}@example.com", password_hash="$argon2id$stub")


class TestCreate:
    async def test_create_populates_id_and_defaults(self, repo: UserRepository):
        user = await repo.create(_user("alice"))

        assert user.id is not None
        assert user.role == UserRole.USER.value
        assert user.created_at is not None
        assert not user.is_admin

    async def test_duplicate_email(self, repo: UserRepository):
        await repo.create(_user("alice", "shared@example.com"))

        with pytest.raises(DuplicateRecordError) as exc_info:
            await repo.create(_user("bob", "shared@example.com"))
        assert exc_info.value.field == "email"

    async def test_duplicate_username(self, repo: UserRepository):
        await repo.create(_user("alice", "a1@example.com"))

        with pytest.raises(DuplicateRecordError) as exc_info:
            await repo.create(_user("alice", "a2@example.com"))
        assert exc_info.value.field == "username"

    async def test_session_usable_after_duplicate(self, repo: UserRepository):
        await repo.create(_user("alice"))
        with pytest.raises(DuplicateRecordError):
            await repo.create(_user("alice"))

        assert (await repo.create(_user("carol"))).id is not None


class TestLookups:
    async def test_get_by_username(self, repo: UserRepository, make_user):
        created = await make_user(username="dora")

        found = await repo.get_by_username("dora")
        assert found is not None
        assert found.id == created.id

    async def test_get_by_username_is_exact(self, repo: UserRepository, make_user):
        await make_user(username="dora")

        assert await repo.get_by_username("Dora") is None
        assert await repo.get_by_username("dor") is None

    async def test_get_by_id_missing(self, repo: UserRepository):
        assert await repo.get_by_id(999) is None


class TestUpdate:
    async def test_update_changes_username_and_email(self, repo: UserRepository, make_user):
        user = await make_user(username="erin")

        updated = await repo.update(user.id, "erin2", "erin2@example.com")

        assert updated.username == "erin2"
        assert updated.email == "erin2@example.com"
        assert (await repo.get_by_username("erin2")).id == user.id

    async def test_update_missing_user(self, repo: UserRepository):
        with pytest.raises(RecordNotFoundError):
            await repo.update(999, "ghost", "ghost@example.com")

    async def test_update_to_taken_email(self, repo: UserRepository, make_user):
        await make_user(username="frank")
        user = await make_user(username="gina")

        with pytest.raises(DuplicateRecordError) as exc_info:
            await repo.update(user.id, "gina", "frank@example.com")
        assert exc_info.value.field == "email"


class TestGetForToken:
    async def test_resolves_valid_token(self, repo: UserRepository, session: AsyncSession, make_user):
        user = await make_user()
        token = await TokenRepository(session).create_new_token(user.id, timedelta(hours=1), SCOPE_AUTHENTICATION)

        found = await repo.get_for_token(SCOPE_AUTHENTICATION, token.plaintext)

        assert found is not None
        assert found.id == user.id

    async def test_unknown_token(self, repo: UserRepository):
        assert await repo.get_for_token(SCOPE_AUTHENTICATION, "NOTATOKEN") is None

    async def test_wrong_scope(self, repo: UserRepository, session: AsyncSession, make_user):
        user = await make_user()
        token = await TokenRepository(session).create_new_token(user.id, timedelta(hours=1), "activation")

        assert await repo.get_for_token(SCOPE_AUTHENTICATION, token.plaintext) is None

    async def test_expired_token(self, repo: UserRepository, session: AsyncSession, make_user):
        user = await make_user()
        token = await TokenRepository(session).create_new_token(user.id, timedelta(hours=1), SCOPE_AUTHENTICATION)

        later = utc_now() + timedelta(hours=2)
        assert await repo.get_for_token(SCOPE_AUTHENTICATION, token.plaintext, now=later) is None
