"""
Health check router for liveness and readiness probes.
"""
from fastapi import APIRouter, status

from app.config import get_settings
from app.database.connections import get_mongo_client, get_redis_client

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """Returns 200 if the API process is up."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check that pings MongoDB and Redis and reports whether
    media upload credentials are present.

    Only the two data stores decide the overall status; the media host is
    informational because registration is the only caller.
    """
    checks = {
        "api": "healthy",
        "mongodb": "unknown",
        "redis": "unknown",
    }

    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        checks["mongodb"] = "healthy"
    except Exception as e:
        checks["mongodb"] = f"unhealthy: {e}"

    try:
        redis = await get_redis_client()
        await redis.ping()
        checks["redis"] = "healthy"
    except Exception as e:
        checks["redis"] = f"unhealthy: {e}"

    all_healthy = all(v == "healthy" for v in checks.values())

    settings = get_settings()
    media = "configured" if (
        settings.cloudinary_cloud_name
        and settings.cloudinary_api_key
        and settings.cloudinary_api_secret
    ) else "not configured"

    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
        "media_upload": media,
    }
