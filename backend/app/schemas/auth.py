"""
Authentication request/response schemas.
"""
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login request body. Either username or email identifies the user."""
    username: Optional[str] = Field(None, description="Username")
    email: Optional[str] = Field(None, description="User email address")
    password: str = Field(..., description="User password")


class TokenPair(BaseModel):
    """Access and refresh token pair."""
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")


class LoginData(TokenPair):
    """Payload returned by a successful login."""
    user: UserResponse = Field(..., description="Logged in user")


class RefreshTokenRequest(BaseModel):
    """Refresh request body, used when the refresh cookie is absent."""
    refresh_token: Optional[str] = Field(None, description="JWT refresh token")


class ChangePasswordRequest(BaseModel):
    """Password change request body."""
    old_password: str = Field(..., description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")
