"""
Chapter and Comment Endpoints.

Anyone can read chapters and their comments. Logged-in users can comment;
only the author of a comment can edit or delete it.
"""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Response, status

from bookclub.core.database.base import MAX_INT
from bookclub.core.database.entities.chapters import Chapter
from bookclub.core.database.errors import RecordNotFoundError
from bookclub.core.database.schemas.books import ChapterRead
from bookclub.core.database.schemas.comments import CommentCreate, CommentRead, PaginatedCommentsResponse
from bookclub.core.logging_config import get_logger
from bookclub.server.services.auth import AuthenticatedUserDep
from bookclub.server.services.deps import ReposDep
from bookclub.server.services.pagination import PaginationDep

logger = get_logger(__name__)

router = APIRouter(tags=["chapters"])

ChapterId = Annotated[int, Path(ge=1, le=MAX_INT, description="Chapter id")]
CommentId = Annotated[int, Path(ge=1, le=MAX_INT, description="Comment id")]


async def _get_chapter(repos: ReposDep, chapter_id: int) -> Chapter:
    chapter = await repos.chapters.get_chapter_by_id(chapter_id)
    if chapter is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="chapter not found")
    return chapter


async def _get_comment(repos: ReposDep, chapter_id: int, comment_id: int) -> CommentRead:
    comment = await repos.comments.get_comment_by_id(comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="comment not found")
    if comment.chapter_id != chapter_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="comment does not belong to this chapter")
    return comment


@router.get(
    "/chapters/{chapter_id}",
    response_model=ChapterRead,
    summary="Get Chapter",
    description="Retrieve a single chapter.",
    response_description="The chapter.",
    responses={404: {"description": "Chapter not found"}},
)
async def get_chapter(repos: ReposDep, chapter_id: ChapterId) -> ChapterRead:
    chapter = await _get_chapter(repos, chapter_id)
    return ChapterRead.model_validate(chapter)


@router.get(
    "/chapters/{chapter_id}/comments",
    response_model=PaginatedCommentsResponse,
    summary="List Chapter Comments",
    description="List the comments of a chapter, newest first.",
    response_description="A page of comments with pagination metadata.",
    responses={
        400: {"description": "Invalid pagination parameters"},
        404: {"description": "Chapter not found"},
    },
)
async def list_comments(
    pagination: PaginationDep,
    repos: ReposDep,
    chapter_id: ChapterId,
) -> PaginatedCommentsResponse:
    await _get_chapter(repos, chapter_id)
    comments, total = await repos.comments.list_for_chapter(chapter_id, pagination.page, pagination.limit)
    return PaginatedCommentsResponse(
        comments=comments,
        page=pagination.page,
        limit=pagination.limit,
        total_items=total,
        total_pages=pagination.total_pages(total),
    )


@router.post(
    "/chapters/{chapter_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Comment",
    description="Comment on a chapter as the authenticated user.",
    response_description="The created comment with its author.",
    responses={
        400: {"description": "Invalid request body"},
        401: {"description": "Not authenticated"},
        404: {"description": "Chapter not found"},
    },
)
async def create_comment(
    data: CommentCreate,
    user: AuthenticatedUserDep,
    repos: ReposDep,
    chapter_id: ChapterId,
) -> CommentRead:
    """
    Create a comment.

    - **body**: Required comment text.
    """
    await _get_chapter(repos, chapter_id)
    comment = await repos.comments.add_comment(data.body, chapter_id, user.id)
    created = await repos.comments.get_comment_by_id(comment.id)
    if created is None:
        raise RecordNotFoundError(f"comment {comment.id} not found")
    return created


@router.get(
    "/chapters/{chapter_id}/comments/{comment_id}",
    response_model=CommentRead,
    summary="Get Comment",
    description="Retrieve a comment of a chapter with its author.",
    response_description="The comment.",
    responses={
        400: {"description": "Comment belongs to another chapter"},
        404: {"description": "Comment not found"},
    },
)
async def get_comment(
    repos: ReposDep,
    chapter_id: ChapterId,
    comment_id: CommentId,
) -> CommentRead:
    return await _get_comment(repos, chapter_id, comment_id)


@router.put(
    "/chapters/{chapter_id}/comments/{comment_id}",
    response_model=CommentRead,
    summary="Update Comment",
    description="Replace the body of one of your own comments.",
    response_description="The updated comment.",
    responses={
        400: {"description": "Invalid body or comment belongs to another chapter"},
        401: {"description": "Not authenticated"},
        403: {"description": "Comment belongs to another user"},
        404: {"description": "Comment not found"},
    },
)
async def update_comment(
    data: CommentCreate,
    user: AuthenticatedUserDep,
    repos: ReposDep,
    chapter_id: ChapterId,
    comment_id: CommentId,
) -> CommentRead:
    """
    Update a comment.

    - **body**: Required new comment text.
    """
    comment = await _get_comment(repos, chapter_id, comment_id)
    if comment.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="you can only edit your own comments")
    updated = await repos.comments.update_comment(comment_id, data.body)
    result = CommentRead.model_validate(updated)
    result.user = comment.user
    return result


@router.delete(
    "/chapters/{chapter_id}/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Comment",
    description="Delete one of your own comments.",
    responses={
        400: {"description": "Comment belongs to another chapter"},
        401: {"description": "Not authenticated"},
        403: {"description": "Comment belongs to another user"},
        404: {"description": "Comment not found"},
    },
)
async def delete_comment(
    user: AuthenticatedUserDep,
    repos: ReposDep,
    chapter_id: ChapterId,
    comment_id: CommentId,
) -> Response:
    comment = await _get_comment(repos, chapter_id, comment_id)
    if comment.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="you can only delete your own comments")
    await repos.comments.delete_comment_by_id(comment_id)
    logger.debug(f"User {user.id} deleted comment {comment_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
