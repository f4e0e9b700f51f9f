"""
Database layer for BookClub.

Structure:
- entities/: SQLModel table models
- repositories/: Data access layer, one repository per business area
- schemas/: API schema models for request/response serialization
- errors.py: Repository exceptions mapped to HTTP status codes by the server
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session factory, table creation)
"""

from .base import MAX_INT, Base
from .errors import DuplicateRecordError, NoFieldsToUpdateError, RecordNotFoundError
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
    utc_now,
)

__all__ = [
    "Base",
    "MAX_INT",
    "DuplicateRecordError",
    "NoFieldsToUpdateError",
    "RecordNotFoundError",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "utc_now",
]
