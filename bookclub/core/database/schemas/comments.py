"""
Schema models for chapter comment API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for creating or editing a comment."""

    body: str = Field(min_length=1, description="Comment text")


class CommentUser(BaseModel):
    """Public view of a comment's author."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str


class CommentRead(BaseModel):
    """Schema for reading a comment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    body: str
    user_id: int
    chapter_id: int
    user: Optional[CommentUser] = None
    created_at: datetime
    updated_at: datetime


class PaginatedCommentsResponse(BaseModel):
    comments: List[CommentRead]
    page: int
    limit: int
    total_items: int
    total_pages: int
