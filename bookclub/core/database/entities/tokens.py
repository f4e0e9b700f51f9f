"""
Token entity model.

Tokens are opaque bearer credentials. The table keys on the SHA-256 digest of
the plaintext so a leaked database row cannot be replayed.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String
from sqlmodel import Field

from ..base import Base


class Token(Base, table=True):
    """Persisted token digest.

    Table: tokens
    """

    __tablename__ = "tokens"
    __table_args__ = ({"extend_existing": True},)

    hash: bytes = Field(sa_type=LargeBinary, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True, nullable=False)
    expiry: datetime = Field(sa_type=DateTime(timezone=True), nullable=False)
    scope: str = Field(sa_type=String(32), nullable=False)

    def __repr__(self) -> str:
        return f"Token(user_id={self.user_id}, scope={self.scope}, expiry={self.expiry})"
