"""
User request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    """User information response (excludes sensitive data)."""
    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")
    email: str = Field(..., description="User email")
    full_name: str = Field(..., description="Display name")
    avatar: str = Field(..., description="Avatar URL")
    cover_image: str = Field(default="", description="Cover image URL")
    watch_history: list[str] = Field(default_factory=list)
    created_at: datetime = Field(..., description="Account creation date")
    updated_at: datetime = Field(..., description="Last update date")
