"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from bookclub.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = logging.getLogger(__name__)

# Create global engine and session factory
engine = create_engine(settings.database_url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    Tables are normally created by Alembic (``alembic upgrade head``). When
    ``BOOKCLUB_AUTO_CREATE_TABLES`` is enabled the ORM metadata is created
    directly, which is convenient for local development against a fresh
    database.
    """
    if not settings.auto_create_tables:
        logger.debug("Skipping table creation; schema is managed by Alembic migrations")
        return
    logger.info("Creating database tables from ORM metadata")
    await create_all(engine)
