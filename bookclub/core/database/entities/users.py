"""
User entity models.

Users register with a username, an email address and a password. Only the
argon2 hash of the password is stored.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, String
from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class UserRole(str, Enum):
    """Role granted to an account."""

    USER = "user"
    ADMIN = "admin"


class UserBase(Base):
    """Base fields for user."""

    username: str = Field(sa_type=String(50), unique=True, nullable=False, description="Unique display name")
    email: str = Field(unique=True, nullable=False, description="Unique email address")
    role: str = Field(default=UserRole.USER.value, sa_type=String(16), nullable=False, description="user or admin")


class User(UserBase, table=True):
    """Registered account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        {"extend_existing": True},
    )

    # Primary key
    id: Optional[int] = Field(default=None, primary_key=True)

    password_hash: str = Field(nullable=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, role={self.role})"
