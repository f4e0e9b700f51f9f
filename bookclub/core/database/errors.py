"""
Repository-level exceptions.

Repositories translate database failures into these exceptions so the HTTP
layer can map them to status codes without inspecting driver errors.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation in PostgreSQL
UNIQUE_VIOLATION = "23505"


class RecordNotFoundError(Exception):
    """The targeted row does not exist (or is not visible to the caller)."""


class DuplicateRecordError(Exception):
    """An insert or update hit a unique constraint."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"duplicate value for {field}")


class NoFieldsToUpdateError(ValueError):
    """A partial update carried no updatable fields."""

    def __init__(self, message: str = "no fields to update") -> None:
        super().__init__(message)


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when ``exc`` was raised by a unique constraint.

    PostgreSQL drivers expose the SQLSTATE (``pgcode`` or ``sqlstate``);
    SQLite only reports it in the message text.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION:
        return True
    message = str(orig if orig is not None else exc)
    return "UNIQUE constraint failed" in message or "duplicate key value violates unique constraint" in message


def duplicate_field(exc: IntegrityError, candidates: Sequence[str]) -> str:
    """Guess which of ``candidates`` caused a unique violation.

    Both backends name the column (or a constraint derived from it) in the
    error message. Falls back to the first candidate.
    """
    message = str(getattr(exc, "orig", None) or exc)
    for field in candidates:
        if field in message:
            return field
    return candidates[0]
