"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from studio_directory.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from studio_directory.api.middleware.error_handler import AuthorizationError
from studio_directory.core.config import get_settings
from studio_directory.schemas.auth import UserContext


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated caller's context.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise _unauthorized("Authorization header required")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format. Expected: Bearer <token>")

    try:
        payload = decode_jwt(parts[1])
    except AuthError as e:
        if e.code == AuthErrorCode.TOKEN_EXPIRED:
            raise _unauthorized("Token has expired") from e
        raise _unauthorized(e.message) from e

    return payload.to_user_context(get_settings().admin_user_ids_list)


async def get_optional_user(
    authorization: Annotated[str | None, Header()] = None,
) -> UserContext | None:
    """Extract the current user if an Authorization header is present.

    Returns None without a header. A header carrying an invalid token still
    raises 401.
    """
    if not authorization:
        return None
    return await get_current_user(authorization)


async def get_admin_user(user: Annotated[UserContext, Depends(get_current_user)]) -> UserContext:
    """Require an authenticated admin caller.

    Raises:
        AuthorizationError: 403 if the caller is not an admin.
    """
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user


# Type aliases for cleaner dependency injection
OptionalUser = Annotated[UserContext | None, Depends(get_optional_user)]
AdminUser = Annotated[UserContext, Depends(get_admin_user)]
