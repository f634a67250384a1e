"""
Security utilities for password hashing and JWT token management.

Access and refresh tokens are signed with separate secrets so that one
can never be replayed in place of the other.
"""
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        plain_password: The plain text password to hash

    Returns:
        Hashed password string
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def _encode(claims: dict[str, Any], secret: str, expires_delta: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    # jti keeps two tokens minted in the same second distinct
    payload = {**claims, "exp": now + expires_delta, "iat": now, "jti": uuid4().hex}
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    user_id: str,
    email: str,
    username: str,
    full_name: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a short-lived JWT access token carrying the user's identity.

    Args:
        user_id: Unique user identifier
        email: User email
        username: User handle
        full_name: Display name
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    claims = {
        "sub": user_id,
        "email": email,
        "username": username,
        "full_name": full_name,
    }
    return _encode(claims, settings.access_token_secret, expires_delta)


def create_refresh_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Create a long-lived JWT refresh token carrying only the user ID.

    Args:
        user_id: Unique user identifier
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    if expires_delta is None:
        expires_delta = timedelta(days=settings.refresh_token_expire_days)

    return _encode({"sub": user_id}, settings.refresh_token_secret, expires_delta)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate an access token.

    Raises:
        JWTError: If token is invalid, expired or signed with another secret
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.access_token_secret,
        algorithms=[settings.jwt_algorithm],
    )


def decode_refresh_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a refresh token.

    Raises:
        JWTError: If token is invalid, expired or signed with another secret
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.refresh_token_secret,
        algorithms=[settings.jwt_algorithm],
    )


__all__ = [
    "JWTError",
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "decode_refresh_token",
]
