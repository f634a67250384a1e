"""
Authentication service: registration, login, logout, token refresh and
password change.
"""
import logging
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from fastapi import status
from jose import JWTError
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import ApiError
from app.core.security import decode_refresh_token
from app.models.user import User
from app.schemas.auth import LoginRequest, TokenPair
from app.services.media_service import CloudinaryUploader, remove_local_file
from app.services.token_service import generate_access_and_refresh_tokens
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

USER_EXISTS = "User with this email or username already exists"


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncIOMotorDatabase, uploader: CloudinaryUploader):
        """Initialize with auth database and media uploader."""
        self.db = db
        self.store = UserStore(db)
        self.uploader = uploader

    async def register_user(
        self,
        *,
        full_name: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
        avatar_path: Optional[str],
        cover_image_path: Optional[str] = None,
    ) -> User:
        """
        Register a new user.

        Staged avatar/cover files are consumed: uploaded, or removed if the
        request is rejected before upload.

        Returns:
            The created user

        Raises:
            ApiError 400: Missing field, missing avatar or avatar upload failure
            ApiError 409: Username or email already taken
            ApiError 500: Created user could not be read back
        """
        try:
            if any(not (field or "").strip() for field in (full_name, email, username, password)):
                raise ApiError(status.HTTP_400_BAD_REQUEST, "All fields are required")

            try:
                validate_email(email.strip(), check_deliverability=False)
            except EmailNotValidError as e:
                raise ApiError(status.HTTP_400_BAD_REQUEST, f"Invalid email address: {e}")

            existing = await self.store.find_by_username_or_email(username=username, email=email)
            if existing:
                raise ApiError(status.HTTP_409_CONFLICT, USER_EXISTS)

            if not avatar_path:
                raise ApiError(status.HTTP_400_BAD_REQUEST, "Avatar image is required")

            avatar = await self.uploader.upload(avatar_path)
            cover_image = await self.uploader.upload(cover_image_path)
            if not avatar:
                raise ApiError(status.HTTP_400_BAD_REQUEST, "Avatar upload failed")

            try:
                user_id = await self.store.create(
                    username=username,
                    email=email,
                    full_name=full_name,
                    password=password,
                    avatar=avatar["url"],
                    cover_image=(cover_image or {}).get("url", ""),
                )
            except DuplicateKeyError:
                raise ApiError(status.HTTP_409_CONFLICT, USER_EXISTS)
        finally:
            remove_local_file(avatar_path)
            remove_local_file(cover_image_path)

        created_user = await self.store.get_by_id(user_id)
        if created_user is None:
            raise ApiError(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Something went wrong while registering the user",
            )

        logger.info("Registered user %s (%s)", created_user.username, user_id)
        return created_user

    async def login(self, request: LoginRequest) -> tuple[User, TokenPair]:
        """
        Authenticate by username or email and issue a token pair.

        Raises:
            ApiError 400: Neither username nor email given
            ApiError 404: No such user
            ApiError 401: Wrong password
        """
        if not ((request.username or "").strip() or (request.email or "").strip()):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Username or email is required")

        user = await self.store.find_by_username_or_email(
            username=request.username, email=request.email
        )
        if user is None:
            raise ApiError(status.HTTP_404_NOT_FOUND, "User does not exist")

        if not user.is_password_correct(request.password):
            logger.info("Failed login for user %s", user.id)
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid password")

        tokens = await generate_access_and_refresh_tokens(self.store, user.id)
        logged_in_user = await self.store.get_by_id(user.id)

        logger.info("User %s logged in", user.id)
        return logged_in_user, tokens

    async def logout(self, user_id: str) -> None:
        """Forget the user's refresh token so it can no longer be used."""
        await self.store.unset_refresh_token(user_id)
        logger.info("User %s logged out", user_id)

    async def refresh_access_token(self, incoming_refresh_token: Optional[str]) -> TokenPair:
        """
        Exchange a valid refresh token for a new token pair (rotation).

        Raises:
            ApiError 401: Missing, invalid, expired, unknown or already-used token
        """
        if not incoming_refresh_token:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

        try:
            payload = decode_refresh_token(incoming_refresh_token)
        except JWTError as e:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, str(e) or "Invalid refresh token")

        user_id = payload.get("sub")
        user = await self.store.get_by_id(user_id) if user_id else None
        if user is None:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid refresh token")

        if incoming_refresh_token != user.refresh_token:
            logger.warning("Stale refresh token presented for user %s", user.id)
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Refresh token is expired or used")

        tokens = await generate_access_and_refresh_tokens(self.store, user.id)
        logger.info("Rotated tokens for user %s", user.id)
        return tokens

    async def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        """
        Change user password after verifying the current one.

        Raises:
            ApiError 404: User not found
            ApiError 400: Current password is incorrect
        """
        user = await self.store.get_by_id(user_id)
        if user is None:
            raise ApiError(status.HTTP_404_NOT_FOUND, "User does not exist")

        if not user.is_password_correct(old_password):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid old password")

        await self.store.set_password(user_id, new_password)
        logger.info("Password changed for user %s", user_id)
