"""
User Auth Backend - FastAPI Application

Registration, login, logout and token refresh over MongoDB, with avatar
uploads to Cloudinary.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.exceptions import register_exception_handlers
from app.core.log_config import configure_logging
from app.database.connections import close_connections, get_database
from app.database.indexes import create_indexes
from app.routers import health, users
from app.services.media_service import close_media_uploader

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Create indexes

    Shutdown:
    - Close database connections and the media upload client
    """
    configure_logging()
    logger.info("Starting up user auth backend...")

    try:
        await create_indexes(await get_database())
    except Exception as e:
        logger.warning("Database initialization warning: %s", e)

    yield

    logger.info("Shutting down user auth backend...")
    await close_media_uploader()
    await close_connections()
    logger.info("Connections closed")


# Create FastAPI application
app = FastAPI(
    title="User Auth API",
    description="""
## User registration and authentication API

### Endpoints
- **POST /api/v1/users/register**: multipart signup with avatar upload
- **POST /api/v1/users/login**: username or email + password
- **POST /api/v1/users/logout**: protected
- **POST /api/v1/users/refresh-token**: rotate the token pair

### Authentication
Protected endpoints read the access token from the `access_token` cookie
or from an `Authorization: Bearer <token>` header.

Every response uses the envelope
`{"status_code", "data", "message", "success"}`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(health.router)
app.include_router(users.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "User Auth API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    run()
