"""
Chapter comment repository.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.comments import Comment
from ..entities.users import User
from ..errors import RecordNotFoundError
from ..schemas.comments import CommentRead, CommentUser
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class CommentRepository(BaseRepository[Comment]):
    """Repository for comment data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Comment)

    async def add_comment(self, body: str, chapter_id: int, user_id: int) -> Comment:
        """Create a comment on a chapter.

        Args:
            body: Comment text
            chapter_id: Chapter being commented on
            user_id: Author of the comment

        Returns:
            Persisted comment with id and timestamps populated
        """
        now = utc_now()
        comment = Comment(body=body, chapter_id=chapter_id, user_id=user_id, created_at=now, updated_at=now)
        self.session.add(comment)
        await self.session.commit()
        await self.session.refresh(comment)
        return comment

    async def get_comment_by_id(self, comment_id: int) -> Optional[CommentRead]:
        """Get a comment together with its author, or None."""
        stmt = select(Comment, User).join(User, User.id == Comment.user_id).where(Comment.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        comment, user = row
        return _to_read(comment, user)

    async def update_comment(self, comment_id: int, body: str) -> Comment:
        """Replace the body of a comment and bump ``updated_at``.

        Raises:
            RecordNotFoundError: no comment with ``comment_id``
        """
        comment = await self.get_by_id(comment_id)
        if comment is None:
            raise RecordNotFoundError(f"comment {comment_id} not found")
        comment.body = body
        comment.updated_at = utc_now()
        self.session.add(comment)
        await self.session.commit()
        await self.session.refresh(comment)
        return comment

    async def delete_comment_by_id(self, comment_id: int) -> None:
        """Delete a comment.

        Raises:
            RecordNotFoundError: no comment with ``comment_id``
        """
        stmt = delete(Comment).where(Comment.id == comment_id).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        if not result.rowcount:
            await self.session.rollback()
            raise RecordNotFoundError(f"comment {comment_id} not found")
        await self.session.commit()

    async def list_for_chapter(self, chapter_id: int, page: int, limit: int) -> Tuple[List[CommentRead], int]:
        """List comments of a chapter, newest first.

        Returns:
            Tuple of (comments on the page, total comments on the chapter)
        """
        total = await self.count(select(Comment.id).where(Comment.chapter_id == chapter_id))
        stmt = (
            select(Comment, User)
            .join(User, User.id == Comment.user_id)
            .where(Comment.chapter_id == chapter_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, QueryBuilder.page_to_offset(page, limit))
        result = await self.session.execute(stmt)
        return [_to_read(comment, user) for comment, user in result.all()], total


def _to_read(comment: Comment, user: User) -> CommentRead:
    read = CommentRead.model_validate(comment)
    read.user = CommentUser.model_validate(user)
    return read
