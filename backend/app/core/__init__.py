"""
Core module - Security, errors, rate limiting, and logging setup.
"""
from app.core.exceptions import ApiError, register_exception_handlers
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
)
from app.core.rate_limit import check_rate_limit, rate_limiter

__all__ = [
    "ApiError",
    "register_exception_handlers",
    "hash_password",
    "verify_password",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "decode_refresh_token",
    "check_rate_limit",
    "rate_limiter",
]
