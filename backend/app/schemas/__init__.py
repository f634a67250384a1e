"""
Request and response schemas for API endpoints.
"""
from app.schemas.auth import (
    ChangePasswordRequest,
    LoginData,
    LoginRequest,
    RefreshTokenRequest,
    TokenPair,
)
from app.schemas.response import ApiResponse
from app.schemas.user import UserResponse

__all__ = [
    # Envelope
    "ApiResponse",
    # Auth
    "LoginRequest",
    "LoginData",
    "TokenPair",
    "RefreshTokenRequest",
    "ChangePasswordRequest",
    # User
    "UserResponse",
]
