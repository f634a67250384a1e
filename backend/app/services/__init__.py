"""
Service layer for business logic.
"""
from app.services.auth_service import AuthService
from app.services.media_service import CloudinaryUploader, upload_on_cloudinary
from app.services.token_service import generate_access_and_refresh_tokens
from app.services.user_store import UserStore

__all__ = [
    "AuthService",
    "CloudinaryUploader",
    "UserStore",
    "generate_access_and_refresh_tokens",
    "upload_on_cloudinary",
]
