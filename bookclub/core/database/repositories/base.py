"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns used across all
repository implementations in the BookClub database layer. Built with async
SQLAlchemy sessions and SQLModel entities.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class BaseRepository(Generic[EntityType]):
    """Base repository holding the session and the entity class it manages."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with database session and SQLModel entity class.

        Args:
            session: Async SQLAlchemy session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def count(self, stmt) -> int:
        """Count the rows a select statement would return.

        Args:
            stmt: Select statement without pagination applied

        Returns:
            Number of matching rows
        """
        result = await self.session.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))
        return int(result.scalar_one())


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a select statement.

        ``None`` values and names that are not columns of ``model`` are skipped.

        Args:
            stmt: Select statement
            model: SQLModel entity class
            filters: Dictionary of field filters

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a select statement.

        Args:
            stmt: Select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt

    @staticmethod
    def page_to_offset(page: int, limit: int) -> int:
        return (page - 1) * limit
