"""
Authentication Dependencies.

Every resource route passes through ``get_current_user`` (the application
mounts it on each router, public ones included):

- no ``Authorization`` header: the caller is anonymous (``None``);
- a header that is not ``Bearer <token>``: 401 ``invalid authorization header``;
- a token that is unknown, expired or of another scope: 401 ``invalid token``.

``require_user`` and ``require_admin`` build on it to guard routes.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from bookclub.core.database.entities.users import User
from bookclub.core.logging_config import get_logger
from bookclub.core.security.tokens import SCOPE_AUTHENTICATION

from .deps import ReposDep

logger = get_logger(__name__)

bearer_header = APIKeyHeader(
    name="Authorization",
    scheme_name="BearerAuth",
    description="Authentication token as `Bearer <token>`, issued by POST /tokens/authentication.",
    auto_error=False,
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def parse_bearer_token(header: str) -> Optional[str]:
    """Extract the token from an ``Authorization`` header value.

    Returns:
        The token, or None when the header is not ``Bearer <token>``
    """
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


async def get_current_user(
    repos: ReposDep,
    authorization: Optional[str] = Security(bearer_header),
) -> Optional[User]:
    """Resolve the caller from the bearer token, or None for anonymous requests."""
    if not authorization:
        return None

    token = parse_bearer_token(authorization)
    if token is None:
        raise _unauthorized("invalid authorization header")

    user = await repos.users.get_for_token(SCOPE_AUTHENTICATION, token)
    if user is None:
        logger.debug("Rejected unknown or expired token")
        raise _unauthorized("invalid token")
    return user


CurrentUserDep = Annotated[Optional[User], Depends(get_current_user)]


async def require_user(user: CurrentUserDep) -> User:
    if user is None:
        raise _unauthorized("you must be logged in")
    return user


AuthenticatedUserDep = Annotated[User, Depends(require_user)]


async def require_admin(user: AuthenticatedUserDep) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="admin privileges required")
    return user


AdminUserDep = Annotated[User, Depends(require_admin)]
