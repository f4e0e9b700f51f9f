"""
User Endpoints.

Registration (POST /users), lookup by username (GET /users), admin creation
(POST /admins) and the caller's own profile (GET/PUT /me).
"""

from fastapi import APIRouter, HTTPException, Query, status
from starlette.concurrency import run_in_threadpool

from bookclub.core.database.entities.users import User, UserRole
from bookclub.core.database.errors import DuplicateRecordError
from bookclub.core.database.schemas.users import RegisterUserRequest, UpdateProfileRequest, UserRead
from bookclub.core.logging_config import get_logger
from bookclub.core.security.passwords import hash_password
from bookclub.server.services.auth import AdminUserDep, AuthenticatedUserDep
from bookclub.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["users"])

_DUPLICATE_MESSAGES = {
    "email": "email already in use",
    "username": "username already taken",
}


def _conflict(exc: DuplicateRecordError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=_DUPLICATE_MESSAGES.get(exc.field, str(exc)),
    )


async def _register(repos: ReposDep, data: RegisterUserRequest, role: UserRole) -> User:
    password_hash = await run_in_threadpool(hash_password, data.password)
    user = User(username=data.username, email=data.email, role=role.value, password_hash=password_hash)
    try:
        user = await repos.users.create(user)
    except DuplicateRecordError as exc:
        raise _conflict(exc) from exc
    logger.info(f"Registered {role.value} {user.username} (id={user.id})")
    return user


@router.post(
    "/users",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
    description="Create a regular user account.",
    response_description="The created user.",
    responses={
        400: {"description": "Invalid request body"},
        409: {"description": "Email or username already exists"},
    },
)
async def register_user(data: RegisterUserRequest, repos: ReposDep) -> UserRead:
    """
    Register a new user.

    - **username**: Required, at most 50 characters, unique.
    - **email**: Required, valid email address, unique.
    - **password**: Required; only its hash is stored.
    """
    user = await _register(repos, data, UserRole.USER)
    return UserRead.model_validate(user)


@router.get(
    "/users",
    response_model=UserRead,
    summary="Get User by Username",
    description="Look up a user by username. Requires authentication.",
    response_description="The matching user.",
    responses={
        400: {"description": "Invalid or missing username"},
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)
async def get_user_by_username(
    _: AuthenticatedUserDep,
    repos: ReposDep,
    username: str = Query(..., min_length=1, max_length=50, description="Exact username to look up"),
) -> UserRead:
    """
    Get a user by username.

    - **username**: Exact username (query parameter).
    """
    user = await repos.users.get_by_username(username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    return UserRead.model_validate(user)


@router.post(
    "/admins",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register Admin",
    description="Create an account with the admin role. Only admins may call this.",
    response_description="The created admin user.",
    responses={
        400: {"description": "Invalid request body"},
        401: {"description": "Not authenticated"},
        403: {"description": "Caller is not an admin"},
        409: {"description": "Email or username already exists"},
    },
)
async def register_admin(data: RegisterUserRequest, _: AdminUserDep, repos: ReposDep) -> UserRead:
    """
    Register a new admin.

    Takes the same body as user registration; the account gets the ``admin`` role.
    """
    user = await _register(repos, data, UserRole.ADMIN)
    return UserRead.model_validate(user)


@router.get(
    "/me",
    response_model=UserRead,
    summary="Get Current User",
    description="Return the user that owns the bearer token.",
    response_description="The authenticated user.",
    responses={401: {"description": "Not authenticated"}},
)
async def get_me(user: AuthenticatedUserDep) -> UserRead:
    return UserRead.model_validate(user)


@router.put(
    "/me",
    response_model=UserRead,
    summary="Update Current User",
    description="Change the username and email of the authenticated user.",
    response_description="The updated user.",
    responses={
        400: {"description": "Invalid request body"},
        401: {"description": "Not authenticated"},
        409: {"description": "Email or username already exists"},
    },
)
async def update_me(data: UpdateProfileRequest, user: AuthenticatedUserDep, repos: ReposDep) -> UserRead:
    """
    Update the caller's profile.

    - **username**: Required, at most 50 characters, unique.
    - **email**: Required, valid email address, unique.
    """
    try:
        updated = await repos.users.update(user.id, data.username, data.email)
    except DuplicateRecordError as exc:
        raise _conflict(exc) from exc
    return UserRead.model_validate(updated)
