"""
Persistence for user documents.

Uniqueness of username and email is enforced by the indexes created at
startup; a lost race surfaces as pymongo's DuplicateKeyError from `create`.
"""
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.security import hash_password
from app.database.databases import auth_db
from app.models.user import User


def normalize_handle(value: str) -> str:
    """Usernames and emails are stored trimmed and lower-cased."""
    return value.strip().lower()


def _object_id(user_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class UserStore:
    """Read/write access to the users collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with auth database."""
        self.db = db
        self.users_collection = db[auth_db.Collections.USERS]

    async def find_by_username_or_email(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[User]:
        """
        Find a user matching the username OR the email.

        Returns:
            User model or None if not found (or nothing to match on)
        """
        clauses = []
        if username and username.strip():
            clauses.append({"username": normalize_handle(username)})
        if email and email.strip():
            clauses.append({"email": normalize_handle(email)})
        if not clauses:
            return None

        user_doc = await self.users_collection.find_one({"$or": clauses})
        if not user_doc:
            return None
        return User.from_document(user_doc)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ObjectId as string

        Returns:
            User model or None if not found or the ID is malformed
        """
        oid = _object_id(user_id)
        if oid is None:
            return None

        user_doc = await self.users_collection.find_one({"_id": oid})
        if not user_doc:
            return None
        return User.from_document(user_doc)

    async def create(
        self,
        *,
        username: str,
        email: str,
        full_name: str,
        password: str,
        avatar: str,
        cover_image: str = "",
    ) -> str:
        """
        Insert a new user; the password is hashed before storage.

        Returns:
            The new user's ID

        Raises:
            DuplicateKeyError: If username or email is already taken
        """
        now = datetime.now(timezone.utc)
        user_doc = {
            "username": normalize_handle(username),
            "email": normalize_handle(email),
            "full_name": full_name.strip(),
            "avatar": avatar,
            "cover_image": cover_image or "",
            "watch_history": [],
            "hashed_password": hash_password(password),
            "created_at": now,
            "updated_at": now,
        }
        result = await self.users_collection.insert_one(user_doc)
        return str(result.inserted_id)

    async def _update(self, user_id: str, update: dict) -> bool:
        oid = _object_id(user_id)
        if oid is None:
            return False
        update.setdefault("$set", {})["updated_at"] = datetime.now(timezone.utc)
        result = await self.users_collection.update_one({"_id": oid}, update)
        return result.matched_count > 0

    async def set_refresh_token(self, user_id: str, refresh_token: str) -> bool:
        """Store the user's current refresh token."""
        return await self._update(user_id, {"$set": {"refresh_token": refresh_token}})

    async def unset_refresh_token(self, user_id: str) -> bool:
        """Remove the stored refresh token (logout)."""
        return await self._update(user_id, {"$unset": {"refresh_token": ""}})

    async def set_password(self, user_id: str, new_password: str) -> bool:
        """Hash and store a new password."""
        return await self._update(
            user_id,
            {"$set": {"hashed_password": hash_password(new_password)}},
        )
