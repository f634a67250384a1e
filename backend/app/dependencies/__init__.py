"""
Dependencies for dependency injection in routes.
"""
from app.dependencies.auth import CurrentUser, get_user_store, verify_jwt

__all__ = [
    "CurrentUser",
    "get_user_store",
    "verify_jwt",
]
