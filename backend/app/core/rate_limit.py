"""
Per-IP rate limiting backed by Redis counters.

Key pattern: "ratelimit:{endpoint}:{ip}", incremented with INCR and given
a TTL of the window in the same transaction (fixed window). EXPIRE NX only
sets the TTL when the key has none, so the window is not extended.
"""
import logging
from typing import Optional

from fastapi import Request, status
from redis.exceptions import RedisError

from app.config import get_settings
from app.core.exceptions import ApiError
from app.database.connections import get_redis_client

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def check_rate_limit(
    ip: str,
    endpoint: str,
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> bool:
    """
    Check if a request should be rate limited.

    Redis being unreachable never blocks a request; the failure is logged
    and the request is allowed.

    Args:
        ip: Client IP address
        endpoint: Endpoint identifier (e.g., "/login")
        limit: Max requests allowed (defaults to login limit)
        window_seconds: Time window in seconds (defaults to config value)

    Returns:
        True if request is allowed, False if rate limited
    """
    settings = get_settings()
    if limit is None:
        limit = settings.login_rate_limit_attempts
    if window_seconds is None:
        window_seconds = settings.rate_limit_window_seconds

    key = f"ratelimit:{endpoint}:{ip}"
    try:
        redis = await get_redis_client()
        pipe = redis.pipeline(transaction=True)
        pipe.incr(key)
        pipe.expire(key, window_seconds, nx=True)
        current, _ = await pipe.execute()
    except (RedisError, OSError) as e:
        logger.warning("Rate limiter unavailable, allowing request: %s", e)
        return True

    if current > limit:
        logger.warning("Rate limit exceeded for %s on %s", ip, endpoint)
        return False
    return True


def rate_limiter(endpoint: str, setting_name: str):
    """
    Dependency factory throttling a route per client IP.

    Usage:
        @router.post("/login", dependencies=[Depends(rate_limiter("/login", "login_rate_limit_attempts"))])

    Args:
        endpoint: Endpoint identifier used in the Redis key
        setting_name: Name of the Settings attribute holding the limit
    """
    async def _limit(request: Request) -> None:
        settings = get_settings()
        allowed = await check_rate_limit(
            get_client_ip(request),
            endpoint,
            limit=getattr(settings, setting_name),
            window_seconds=settings.rate_limit_window_seconds,
        )
        if not allowed:
            raise ApiError(
                status.HTTP_429_TOO_MANY_REQUESTS,
                "Too many attempts. Please try again later.",
            )

    return _limit
