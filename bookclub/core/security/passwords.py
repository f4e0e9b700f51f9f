"""Password hashing backed by argon2-cffi."""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError

_hasher = PasswordHasher()


def hash_password(plain_text: str) -> str:
    """Return an encoded argon2 hash for ``plain_text``."""
    return _hasher.hash(plain_text)


def verify_password(password_hash: str, plain_text: str) -> bool:
    """Check ``plain_text`` against a stored hash.

    A mismatch returns ``False``. A malformed stored hash raises
    ``argon2.exceptions.InvalidHashError`` so callers can report a server error.
    """
    try:
        return _hasher.verify(password_hash, plain_text)
    except VerifyMismatchError:
        return False
