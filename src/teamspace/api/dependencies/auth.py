"""Authentication dependencies.

The token only proves identity. Role and business come from the user row,
re-read on every request, so a role change applies to the very next call.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.teamspace.api.dependencies.services import AuthServiceDep
from src.teamspace.core.errors import InvalidCredentials
from src.teamspace.core.logging import bind_user_context
from src.teamspace.core.security import decode_access_token
from src.teamspace.models import User


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_id_from_header(authorization: str | None) -> UUID:
    if not authorization or not authorization.startswith("Bearer "):
        raise _unauthorized("Missing or invalid authorization header")

    user_id = decode_access_token(authorization.removeprefix("Bearer "))
    if user_id is None:
        raise _unauthorized("Invalid or expired token")
    return user_id


async def get_current_user(
    auth_service: AuthServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Validate the bearer token and load the caller's current state."""
    user_id = _user_id_from_header(authorization)
    try:
        user = await auth_service.refresh_user(user_id)
    except InvalidCredentials as e:
        raise _unauthorized("User not found or inactive") from e

    bind_user_context(user.id, user.business_id, user.role, user.email)
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
