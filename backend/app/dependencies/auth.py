"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Optional

from fastapi import Depends, Request, status
from jose import JWTError

from app.core.exceptions import ApiError
from app.core.security import decode_access_token
from app.database.connections import get_database
from app.models.user import User
from app.services.user_store import UserStore

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"


def extract_access_token(request: Request) -> Optional[str]:
    """Access token from the cookie, falling back to `Authorization: Bearer <token>`."""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_user_store() -> UserStore:
    """Dependency to get a UserStore bound to the auth database."""
    return UserStore(await get_database())


async def verify_jwt(
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> User:
    """
    Dependency resolving the authenticated user from the access token.

    The user is returned without password hash or refresh token and is
    also attached to `request.state.user`.

    Raises:
        ApiError 401: If the token is missing, invalid or expired
        ApiError 401: If the user no longer exists
    """
    token = extract_access_token(request)
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

    try:
        payload = decode_access_token(token)
    except JWTError:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    user_id = payload.get("sub")
    user = await store.get_by_id(user_id) if user_id else None
    if user is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    public_user = user.model_copy(update={"hashed_password": None, "refresh_token": None})
    request.state.user = public_user
    return public_user


# Type alias for cleaner route signatures
CurrentUser = Annotated[User, Depends(verify_jwt)]
