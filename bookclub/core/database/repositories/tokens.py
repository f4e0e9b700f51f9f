"""
Token repository.

Persists token digests and revokes them. Plaintext tokens never reach the
database; ``create_new_token`` hands the plaintext back exactly once.
"""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.core.security.tokens import NewToken, generate_token

from ..entities.tokens import Token
from ..utils import utc_now


class TokenRepository:
    """Repository for token data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_new_token(self, user_id: int, ttl: timedelta, scope: str) -> NewToken:
        """Generate a token for ``user_id`` and store its digest.

        Args:
            user_id: Owner of the token
            ttl: Token lifetime
            scope: Token scope

        Returns:
            NewToken carrying the plaintext for the client
        """
        token = generate_token(user_id, ttl, scope)
        await self.insert(token)
        return token

    async def insert(self, token: NewToken) -> None:
        self.session.add(Token(hash=token.hash, user_id=token.user_id, expiry=token.expiry, scope=token.scope))
        await self.session.commit()

    async def delete_all_for_user(self, scope: str, user_id: int) -> int:
        """Revoke every token of ``user_id`` in ``scope``.

        Returns:
            Number of tokens removed
        """
        stmt = (
            delete(Token)
            .where(Token.scope == scope)
            .where(Token.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def delete_expired(self) -> int:
        """Remove tokens whose expiry has passed.

        Returns:
            Number of tokens removed
        """
        stmt = delete(Token).where(Token.expiry <= utc_now()).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
