"""
User repository.

Data access for accounts: registration, profile updates, lookups by name or
id, and resolving a bearer token to its owner.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.core.security.tokens import hash_token

from ..entities.tokens import Token
from ..entities.users import User
from ..errors import DuplicateRecordError, RecordNotFoundError, duplicate_field, is_unique_violation
from ..utils import utc_now
from .base import BaseRepository

_UNIQUE_FIELDS = ("email", "username")


class UserRepository(BaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: User instance with ``password_hash`` already set

        Returns:
            Persisted user with ``id`` and ``created_at`` populated

        Raises:
            DuplicateRecordError: email or username already taken
        """
        self.session.add(user)
        await self._commit()
        await self.session.refresh(user)
        return user

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, user_id: int, username: str, email: str) -> User:
        """Change the username and email of a user.

        Raises:
            RecordNotFoundError: no user with ``user_id``
            DuplicateRecordError: email or username already taken
        """
        user = await self.get_by_id(user_id)
        if user is None:
            raise RecordNotFoundError(f"user {user_id} not found")
        user.username = username
        user.email = email
        self.session.add(user)
        await self._commit()
        await self.session.refresh(user)
        return user

    async def get_for_token(self, scope: str, plaintext: str, now: Optional[datetime] = None) -> Optional[User]:
        """Resolve a plaintext token to the user that owns it.

        The token must match on digest and scope and must not be expired.

        Args:
            scope: Token scope, e.g. ``authentication``
            plaintext: Token as presented by the client
            now: Reference time for the expiry check (defaults to current UTC)

        Returns:
            Owning user or None
        """
        stmt = (
            select(User)
            .join(Token, Token.user_id == User.id)
            .where(Token.hash == hash_token(plaintext))
            .where(Token.scope == scope)
            .where(Token.expiry > (now or utc_now()))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if is_unique_violation(exc):
                raise DuplicateRecordError(duplicate_field(exc, _UNIQUE_FIELDS)) from exc
            raise
