"""
Book Endpoints.

The catalogue is public to read; creating, replacing and deleting books
requires an admin.
"""

from fastapi import APIRouter, HTTPException, Path, Response, status

from bookclub.core.database.base import MAX_INT
from bookclub.core.database.errors import DuplicateRecordError, RecordNotFoundError
from bookclub.core.database.schemas.books import BookCreate, BookRead, PaginatedBooksResponse
from bookclub.core.logging_config import get_logger
from bookclub.server.services.auth import AdminUserDep
from bookclub.server.services.deps import ReposDep
from bookclub.server.services.pagination import PaginationDep

logger = get_logger(__name__)

router = APIRouter(tags=["books"])

BOOK_NOT_FOUND = "book not found"


def _duplicate(exc: DuplicateRecordError) -> HTTPException:
    if exc.field == "isbn_13":
        detail = "a book with this ISBN-13 already exists"
    elif exc.field == "name":
        detail = "publisher or author was created concurrently, retry the request"
    else:
        detail = "duplicate chapter number"
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


@router.get(
    "/books",
    response_model=PaginatedBooksResponse,
    summary="List Books",
    description="List books ordered by id, one page at a time.",
    response_description="A page of books with pagination metadata.",
    responses={400: {"description": "Invalid pagination parameters"}},
)
async def list_books(pagination: PaginationDep, repos: ReposDep) -> PaginatedBooksResponse:
    """
    List books.

    - **page**: 1-based page number (default 1).
    - **limit**: Page size, 1 to 100 (default 20).
    """
    books, total = await repos.books.get_all_books(pagination.page, pagination.limit)
    return PaginatedBooksResponse(
        books=books,
        page=pagination.page,
        limit=pagination.limit,
        total_items=total,
        total_pages=pagination.total_pages(total),
    )


@router.get(
    "/books/{book_id}",
    response_model=BookRead,
    summary="Get Book",
    description="Retrieve a book with its authors, publisher, cover images and chapters.",
    response_description="The book.",
    responses={
        400: {"description": "Invalid book id"},
        404: {"description": "Book not found"},
    },
)
async def get_book(repos: ReposDep, book_id: int = Path(..., ge=1, le=MAX_INT)) -> BookRead:
    book = await repos.books.get_book_by_id(book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND)
    return book


@router.post(
    "/books",
    response_model=BookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Book",
    description="Add a book with its publisher, authors, cover images and chapters in one transaction.",
    response_description="The created book.",
    responses={
        400: {"description": "Invalid request body"},
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not an admin"},
        409: {"description": "ISBN-13 already exists"},
    },
)
async def create_book(data: BookCreate, admin: AdminUserDep, repos: ReposDep) -> BookRead:
    """
    Create a book.

    Publishers and authors are matched by name and created when missing.

    - **title**: Required.
    - **publisher**: Required publisher name.
    - **authors**: Author names in display order.
    - **isbn_13**: Required, unique.
    - **published_date**: Optional, `YYYY-MM-DD`.
    - **book_images**: Optional cover image URLs.
    - **chapters**: Optional list of `{number, title}` with unique numbers.
    """
    try:
        book = await repos.books.add_book(data)
    except DuplicateRecordError as exc:
        raise _duplicate(exc) from exc
    logger.info(f"Admin {admin.id} added book {book.id} ({book.isbn_13})")
    return book


@router.put(
    "/books/{book_id}",
    response_model=BookRead,
    summary="Replace Book",
    description="Replace a book's details, publisher, authors, cover images and chapters.",
    response_description="The updated book.",
    responses={
        400: {"description": "Invalid book id or request body"},
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not an admin"},
        404: {"description": "Book not found"},
        409: {"description": "ISBN-13 already exists"},
    },
)
async def update_book(
    data: BookCreate,
    _: AdminUserDep,
    repos: ReposDep,
    book_id: int = Path(..., ge=1, le=MAX_INT),
) -> BookRead:
    """
    Replace a book.

    Takes the same body as book creation. Chapters are matched by number, so
    comments on chapters that keep their number survive the update.
    """
    try:
        return await repos.books.update_book(book_id, data)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND) from exc
    except DuplicateRecordError as exc:
        raise _duplicate(exc) from exc


@router.delete(
    "/books/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Book",
    description="Delete a book together with its chapters, comments, images and shelf entries.",
    responses={
        400: {"description": "Invalid book id"},
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not an admin"},
        404: {"description": "Book not found"},
    },
)
async def delete_book(_: AdminUserDep, repos: ReposDep, book_id: int = Path(..., ge=1, le=MAX_INT)) -> Response:
    try:
        await repos.books.delete_book_by_id(book_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOK_NOT_FOUND) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
