"""
Token Endpoints.

POST /tokens/authentication exchanges a username and password for a bearer
token; DELETE /tokens/authentication revokes all of the caller's tokens.
"""

from datetime import timedelta

from fastapi import APIRouter, HTTPException, Response, status
from starlette.concurrency import run_in_threadpool

from bookclub.core.database.schemas.tokens import AuthToken, CreateTokenRequest, TokenResponse
from bookclub.core.logging_config import get_logger
from bookclub.core.security.passwords import verify_password
from bookclub.core.security.tokens import SCOPE_AUTHENTICATION
from bookclub.server.core.config import settings
from bookclub.server.services.auth import AuthenticatedUserDep
from bookclub.server.services.deps import ReposDep

logger = get_logger(__name__)

router = APIRouter(tags=["tokens"])


@router.post(
    "/tokens/authentication",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log In",
    description="Create an authentication token from a username and password.",
    response_description="The plaintext token and its expiry.",
    responses={
        400: {"description": "Invalid request body"},
        401: {"description": "Invalid credentials"},
    },
)
async def create_authentication_token(data: CreateTokenRequest, repos: ReposDep) -> TokenResponse:
    """
    Log in.

    The plaintext token is returned only in this response; send it back as
    ``Authorization: Bearer <token>``.

    - **username**: Account username.
    - **password**: Account password.
    """
    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials")

    user = await repos.users.get_by_username(data.username)
    if user is None:
        raise invalid
    if not await run_in_threadpool(verify_password, user.password_hash, data.password):
        logger.info(f"Failed login for {data.username}")
        raise invalid

    await repos.tokens.delete_expired()
    token = await repos.tokens.create_new_token(
        user.id, timedelta(hours=settings.auth_token_ttl_hours), SCOPE_AUTHENTICATION
    )
    return TokenResponse(auth_token=AuthToken(token=token.plaintext, expiry=token.expiry))


@router.delete(
    "/tokens/authentication",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Log Out",
    description="Revoke every authentication token of the caller.",
    responses={401: {"description": "Not authenticated"}},
)
async def delete_authentication_tokens(user: AuthenticatedUserDep, repos: ReposDep) -> Response:
    removed = await repos.tokens.delete_all_for_user(SCOPE_AUTHENTICATION, user.id)
    logger.debug(f"Revoked {removed} token(s) for user {user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
