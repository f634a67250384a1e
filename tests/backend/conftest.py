"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with backend-specific helpers
for testing FastAPI routes against in-memory MongoDB and Redis.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.config import get_settings

USERS_URL = "/api/v1/users"


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest.fixture
def sync_mongo_client():
    """
    mongomock-motor client created outside any event loop, so the
    TestClient's own loop can drive it.
    """
    from mongomock_motor import AsyncMongoMockClient
    return AsyncMongoMockClient()


@pytest.fixture
def app_db(sync_mongo_client):
    return sync_mongo_client[get_settings().mongo_db_name]


@pytest.fixture
def app_with_mocks(app_db, uploader, fake_redis_server):
    """
    Create the FastAPI app with database, Redis and media host mocked.

    Startup index creation runs against the mock database, so uniqueness
    constraints behave like production.
    """
    import fakeredis.aioredis

    from app.dependencies.auth import get_user_store
    from app.main import app
    from app.routers.users import get_auth_service
    from app.services.auth_service import AuthService
    from app.services.user_store import UserStore

    async def get_db():
        return app_db

    async def get_redis():
        return fakeredis.aioredis.FakeRedis(server=fake_redis_server, decode_responses=True)

    async def auth_service_override():
        return AuthService(app_db, uploader)

    async def user_store_override():
        return UserStore(app_db)

    app.dependency_overrides[get_auth_service] = auth_service_override
    app.dependency_overrides[get_user_store] = user_store_override

    with patch("app.main.get_database", get_db), \
         patch("app.core.rate_limit.get_redis_client", get_redis):
        yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app_with_mocks):
    """TestClient using the mocked app."""
    with TestClient(app_with_mocks) as c:
        yield c


# =============================================================================
# Request Helpers
# =============================================================================

@pytest.fixture
def register(client, test_user_data):
    """
    Helper posting the multipart registration form.

    Usage:
        response = register(username="other", cover=True)
    """
    def _register(avatar: bool = True, cover: bool = False, **overrides):
        fields = {**test_user_data, **overrides}
        files = {}
        if avatar:
            files["avatar"] = ("avatar.png", b"\x89PNG avatar", "image/png")
        if cover:
            files["cover_image"] = ("cover.jpg", b"\xff\xd8 cover", "image/jpeg")
        return client.post(f"{USERS_URL}/register", data=fields, files=files or None)
    return _register


@pytest.fixture
def registered_user(register, test_user_data) -> dict:
    """Register the default test user and return its public data."""
    response = register()
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def logged_in(client, registered_user, test_user_data) -> dict:
    """Log the default user in; the client now carries auth cookies."""
    response = client.post(
        f"{USERS_URL}/login",
        json={
            "username": test_user_data["username"],
            "password": test_user_data["password"],
        },
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error envelope structure."""
    def _assert(response, status_code: int, message_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert data["success"] is False
        assert data["status_code"] == status_code
        assert data["data"] is None
        assert "errors" in data
        if message_contains:
            assert message_contains.lower() in data["message"].lower()
    return _assert
