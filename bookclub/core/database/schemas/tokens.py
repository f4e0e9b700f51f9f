"""
Schema models for token API requests and responses.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreateTokenRequest(BaseModel):
    """Credentials exchanged for an authentication token."""

    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AuthToken(BaseModel):
    token: str = Field(description="Plaintext bearer token; shown only once")
    expiry: datetime


class TokenResponse(BaseModel):
    auth_token: AuthToken
