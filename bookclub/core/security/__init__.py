"""
Security primitives.

- passwords: argon2 password hashing and verification
- tokens: opaque bearer token generation and hashing
"""

from .passwords import hash_password, verify_password
from .tokens import SCOPE_AUTHENTICATION, NewToken, generate_token, hash_token

__all__ = [
    "SCOPE_AUTHENTICATION",
    "NewToken",
    "generate_token",
    "hash_password",
    "hash_token",
    "verify_password",
]
