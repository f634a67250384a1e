"""
Global test fixtures.

This module provides shared fixtures for all tests including:
- Environment defaults (secrets, insecure cookies for http test clients)
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- A Cloudinary uploader backed by httpx.MockTransport
- Test user factories
"""

import os
import sys
import tempfile
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "demo-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "123456")
os.environ.setdefault("CLOUDINARY_API_SECRET", "cloud-secret")
os.environ.setdefault("UPLOAD_TEMP_DIR", tempfile.mkdtemp(prefix="uploads-"))

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    from mongomock_motor import AsyncMongoMockClient
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_auth_db(mock_async_mongo_client):
    """Provide mock auth database with the real app's indexes."""
    from app.database.databases.auth_db import create_auth_indexes

    db = mock_async_mongo_client[get_settings().mongo_db_name]
    await create_auth_indexes(db)
    yield db


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest.fixture
def fake_redis_server():
    """Shared in-memory Redis server; clients are created per event loop."""
    import fakeredis
    return fakeredis.FakeServer()


@pytest_asyncio.fixture
async def mock_async_redis(fake_redis_server):
    """
    Create an async mock Redis client using fakeredis.
    """
    import fakeredis.aioredis
    redis_client = fakeredis.aioredis.FakeRedis(server=fake_redis_server, decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


# =============================================================================
# Media Upload Fixtures
# =============================================================================

class CloudinaryStub:
    """Records upload requests and answers like the Cloudinary upload API."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail = False
        # 1-based request numbers that should fail
        self.fail_on: set[int] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        n = len(self.requests)
        if self.fail or n in self.fail_on:
            return httpx.Response(500, json={"error": {"message": "boom"}})
        return httpx.Response(
            200,
            json={
                "public_id": f"asset{n}",
                "url": f"http://res.cloudinary.com/demo-cloud/image/upload/asset{n}.png",
                "secure_url": f"https://res.cloudinary.com/demo-cloud/image/upload/asset{n}.png",
            },
        )


@pytest.fixture
def cloudinary_stub() -> CloudinaryStub:
    return CloudinaryStub()


@pytest.fixture
def uploader(cloudinary_stub):
    """CloudinaryUploader whose HTTP traffic goes to `cloudinary_stub`."""
    from app.services.media_service import CloudinaryUploader
    return CloudinaryUploader(transport=httpx.MockTransport(cloudinary_stub))


@pytest.fixture
def staged_file(tmp_path):
    """Factory writing a fake image to disk and returning its path."""
    def _make(name: str = "avatar.png", content: bytes = b"\x89PNG fake image") -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)
    return _make


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def test_user_data() -> dict:
    """Basic test user data for registration."""
    return {
        "full_name": "Test User",
        "email": "testuser@example.com",
        "username": "testuser",
        "password": "SecurePassword123!",
    }
