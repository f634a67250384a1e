"""
User model for the auth database.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.security import (
    create_access_token,
    create_refresh_token,
    verify_password,
)

# Fields never sent back to clients
PRIVATE_FIELDS = {"hashed_password", "refresh_token"}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """
    User document model for MongoDB users collection.
    """
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    username: str = Field(..., description="Unique lower-case handle")
    email: EmailStr = Field(..., description="Unique email address")
    full_name: str = Field(..., description="Display name")
    avatar: str = Field(..., description="Hosted avatar image URL")
    cover_image: str = Field(default="", description="Hosted cover image URL")
    watch_history: list[str] = Field(
        default_factory=list,
        description="IDs of watched videos"
    )
    hashed_password: Optional[str] = Field(None, description="Bcrypt hashed password")
    refresh_token: Optional[str] = Field(
        None,
        description="Currently valid refresh token"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        """Build a User from a raw MongoDB document."""
        doc = dict(doc)
        doc["_id"] = str(doc["_id"])
        doc["watch_history"] = [str(v) for v in doc.get("watch_history", [])]
        return cls(**doc)

    def is_password_correct(self, password: str) -> bool:
        """Check a plain password against the stored hash."""
        if not self.hashed_password or not password:
            return False
        return verify_password(password, self.hashed_password)

    def generate_access_token(self) -> str:
        return create_access_token(
            user_id=self.id,
            email=self.email,
            username=self.username,
            full_name=self.full_name,
        )

    def generate_refresh_token(self) -> str:
        return create_refresh_token(user_id=self.id)

    def public_dict(self) -> dict[str, Any]:
        """Serializable view without password hash or refresh token."""
        return self.model_dump(exclude=PRIVATE_FIELDS)
