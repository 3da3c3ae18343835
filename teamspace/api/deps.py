"""FastAPI dependencies for request authentication."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from teamspace.api.middleware.auth import AuthError, decode_jwt
from teamspace.schemas.auth import UserContext


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Resolve the caller from a Supabase bearer token.

    The returned context is what routes hand to the services; nothing
    downstream reads identity from ambient state.

    Raises:
        HTTPException: 401 if the header is missing, malformed, or the token is rejected.
    """
    if not authorization:
        raise _unauthorized("Authorization header required")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise _unauthorized("Invalid authorization header format. Expected: Bearer <token>")

    try:
        return decode_jwt(token).to_user_context(token)
    except AuthError as e:
        raise _unauthorized(e.message) from e


CurrentUser = Annotated[UserContext, Depends(get_current_user)]
