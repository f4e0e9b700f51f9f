"""
Schema models for user API requests and responses.

Password hashes are never part of a response schema.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


class UserRead(BaseModel):
    """Schema for reading a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: str
    created_at: datetime


class RegisterUserRequest(BaseModel):
    """Schema for registering a user (or an admin)."""

    username: str = Field(min_length=1, max_length=50, description="Unique display name, at most 50 characters")
    email: str = Field(pattern=EMAIL_PATTERN, description="Valid email address")
    password: str = Field(min_length=1, description="Plain-text password, hashed before storage")


class UpdateProfileRequest(BaseModel):
    """Schema for updating the caller's own profile."""

    username: str = Field(min_length=1, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN)
