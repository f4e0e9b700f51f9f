"""
Comment entity model.

Readers comment on chapters. Only the author of a comment may edit or remove it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base
from ..utils import utc_now


class Comment(Base, table=True):
    """Table: comments"""

    __tablename__ = "comments"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    body: str = Field(sa_type=Text, nullable=False)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True, nullable=False)
    chapter_id: int = Field(foreign_key="chapters.id", ondelete="CASCADE", index=True, nullable=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"Comment(id={self.id}, chapter_id={self.chapter_id}, user_id={self.user_id})"
