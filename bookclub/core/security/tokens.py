"""
Opaque bearer tokens.

A token is 16 random bytes rendered as unpadded base32. Only the SHA-256
digest of that plaintext is persisted; the plaintext is handed to the client
once, when the token is issued.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

SCOPE_AUTHENTICATION = "authentication"


@dataclass(frozen=True)
class NewToken:
    """A freshly issued token, including its plaintext."""

    plaintext: str
    hash: bytes
    user_id: int
    expiry: datetime
    scope: str


def hash_token(plain_text: str) -> bytes:
    return hashlib.sha256(plain_text.encode("utf-8")).digest()


def generate_token(user_id: int, ttl: timedelta, scope: str) -> NewToken:
    """Issue a new token for ``user_id`` valid for ``ttl``.

    Args:
        user_id: Owner of the token
        ttl: Lifetime of the token
        scope: Token scope (e.g. ``authentication``)

    Returns:
        NewToken with plaintext, digest and expiry populated
    """
    plaintext = base64.b32encode(secrets.token_bytes(16)).decode("ascii").rstrip("=")
    return NewToken(
        plaintext=plaintext,
        hash=hash_token(plaintext),
        user_id=user_id,
        expiry=datetime.now(timezone.utc) + ttl,
        scope=scope,
    )
