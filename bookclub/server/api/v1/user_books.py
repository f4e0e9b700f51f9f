"""
User-Book (Shelf) Endpoints.

Every route acts on the authenticated user's own shelf. Rows of other users
are invisible: updating or deleting them answers 404.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from bookclub.core.database.base import MAX_INT
from bookclub.core.database.entities.user_books import UserBookStatus
from bookclub.core.database.errors import DuplicateRecordError, NoFieldsToUpdateError, RecordNotFoundError
from bookclub.core.database.schemas.user_books import UpdateUserBookRequest, UserBookRead, UserBooksResponse
from bookclub.core.logging_config import get_logger
from bookclub.server.services.auth import AuthenticatedUserDep
from bookclub.server.services.deps import ReposDep
from bookclub.server.services.pagination import PaginationDep

logger = get_logger(__name__)

router = APIRouter(tags=["user-books"])

USER_BOOK_NOT_FOUND = "user book not found"


@router.get(
    "/user-books",
    response_model=UserBooksResponse,
    summary="List Shelf",
    description="List the caller's shelf, most recently updated first, optionally filtered by status.",
    response_description="A page of shelf entries with their books.",
    responses={
        400: {"description": "Invalid status or pagination parameters"},
        401: {"description": "Not authenticated"},
    },
)
async def list_user_books(
    user: AuthenticatedUserDep,
    pagination: PaginationDep,
    repos: ReposDep,
    status_filter: Optional[UserBookStatus] = Query(None, alias="status", description="wishlist, reading or completed"),
) -> UserBooksResponse:
    """
    List the caller's shelf.

    - **status**: Optional filter (`wishlist`, `reading`, `completed`).
    - **page**: 1-based page number (default 1).
    - **limit**: Page size, 1 to 100 (default 20).
    """
    user_books = await repos.user_books.get_user_books(
        user.id,
        status=status_filter.value if status_filter else None,
        page=pagination.page,
        limit=pagination.limit,
    )
    return UserBooksResponse(user_books=user_books, page=pagination.page, limit=pagination.limit)


@router.post(
    "/user-books",
    response_model=UserBookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Book to Shelf",
    description="Put a book on the caller's shelf.",
    response_description="The created shelf entry.",
    responses={
        400: {"description": "Missing or invalid book_id or status"},
        401: {"description": "Not authenticated"},
        404: {"description": "Book not found"},
        409: {"description": "Book already on the shelf"},
    },
)
async def add_user_book(
    user: AuthenticatedUserDep,
    repos: ReposDep,
    book_id: int = Query(..., ge=1, le=MAX_INT, description="Book to shelve"),
    status_value: UserBookStatus = Query(UserBookStatus.WISHLIST, alias="status", description="Initial status"),
) -> UserBookRead:
    """
    Add a book to the shelf.

    - **book_id**: Required book id (query parameter).
    - **status**: `wishlist` (default), `reading` or `completed`.
    """
    try:
        user_book = await repos.user_books.add_user_book(user.id, book_id, status_value.value)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="book not found") from exc
    except DuplicateRecordError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="book already on shelf") from exc
    return UserBookRead.model_validate(user_book)


@router.patch(
    "/user-books/{user_book_id}",
    response_model=UserBookRead,
    summary="Update Reading Progress",
    description="Partially update status, progress or completion date of a shelf entry.",
    response_description="The updated shelf entry.",
    responses={
        400: {"description": "Invalid id, invalid values or empty body"},
        401: {"description": "Not authenticated"},
        404: {"description": "Shelf entry not found"},
    },
)
async def update_user_book(
    data: UpdateUserBookRequest,
    user: AuthenticatedUserDep,
    repos: ReposDep,
    user_book_id: int = Path(..., ge=1, le=MAX_INT),
) -> UserBookRead:
    """
    Update a shelf entry.

    Only the fields present in the body are changed.

    - **status**: `wishlist`, `reading` or `completed`. Moving to `completed`
      stamps `completed_at` with today unless it is sent explicitly; moving to
      `reading` stamps `started_at` if it was empty.
    - **pages_read**: Pages read so far (>= 0).
    - **percentage_read**: Progress between 0 and 100.
    - **completed_at**: Completion date; `null` clears it.
    """
    try:
        user_book = await repos.user_books.update_user_book(user.id, user_book_id, data.changes())
    except NoFieldsToUpdateError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="no fields to update") from exc
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_BOOK_NOT_FOUND) from exc
    return UserBookRead.model_validate(user_book)


@router.delete(
    "/user-books/{user_book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Book from Shelf",
    description="Delete one of the caller's shelf entries.",
    responses={
        400: {"description": "Invalid id"},
        401: {"description": "Not authenticated"},
        404: {"description": "Shelf entry not found"},
    },
)
async def delete_user_book(
    user: AuthenticatedUserDep,
    repos: ReposDep,
    user_book_id: int = Path(..., ge=1, le=MAX_INT),
) -> Response:
    try:
        await repos.user_books.delete_user_book(user.id, user_book_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_BOOK_NOT_FOUND) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
