"""
Tests for the user record store and the User model helpers.
"""

import pytest
from pymongo.errors import DuplicateKeyError


@pytest.fixture
def store(mock_auth_db):
    from app.services.user_store import UserStore
    return UserStore(mock_auth_db)


async def create_user(store, **overrides) -> str:
    fields = {
        "username": "Alice",
        "email": "Alice@Example.com",
        "full_name": "  Alice Liddell ",
        "password": "Wonderland1!",
        "avatar": "http://cdn/avatar.png",
    }
    fields.update(overrides)
    return await store.create(**fields)


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_normalizes_and_hashes(self, store, mock_auth_db):
        user_id = await create_user(store)

        user = await store.get_by_id(user_id)

        assert user.username == "alice"
        assert user.email == "alice@example.com"
        assert user.full_name == "Alice Liddell"
        assert user.cover_image == ""
        assert user.watch_history == []
        assert user.hashed_password != "Wonderland1!"
        assert user.refresh_token is None

        raw = await mock_auth_db.users.find_one({"username": "alice"})
        assert "password" not in raw
        assert raw["hashed_password"].startswith("$2")

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected_by_index(self, store):
        await create_user(store)

        with pytest.raises(DuplicateKeyError):
            await create_user(store, email="other@example.com")

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_by_index(self, store):
        await create_user(store)

        with pytest.raises(DuplicateKeyError):
            await create_user(store, username="bob", email="ALICE@example.com")


class TestLookup:

    @pytest.mark.asyncio
    async def test_find_by_username(self, store):
        await create_user(store)

        user = await store.find_by_username_or_email(username="ALICE")

        assert user is not None
        assert user.username == "alice"

    @pytest.mark.asyncio
    async def test_find_by_email(self, store):
        await create_user(store)

        user = await store.find_by_username_or_email(email="alice@example.com")

        assert user is not None

    @pytest.mark.asyncio
    async def test_find_matches_either_field(self, store):
        await create_user(store)

        user = await store.find_by_username_or_email(username="nobody", email="alice@example.com")

        assert user is not None

    @pytest.mark.asyncio
    async def test_find_without_criteria_returns_none(self, store):
        await create_user(store)

        assert await store.find_by_username_or_email() is None
        assert await store.find_by_username_or_email(username="  ", email="") is None

    @pytest.mark.asyncio
    async def test_get_by_id_malformed_returns_none(self, store):
        assert await store.get_by_id("not-an-object-id") is None

    @pytest.mark.asyncio
    async def test_get_by_id_unknown_returns_none(self, store):
        assert await store.get_by_id("507f1f77bcf86cd799439011") is None


class TestUpdates:

    @pytest.mark.asyncio
    async def test_set_and_unset_refresh_token(self, store):
        user_id = await create_user(store)

        assert await store.set_refresh_token(user_id, "token-1") is True
        assert (await store.get_by_id(user_id)).refresh_token == "token-1"

        assert await store.unset_refresh_token(user_id) is True
        assert (await store.get_by_id(user_id)).refresh_token is None

    @pytest.mark.asyncio
    async def test_update_unknown_user_reports_false(self, store):
        assert await store.set_refresh_token("507f1f77bcf86cd799439011", "x") is False
        assert await store.set_refresh_token("garbage", "x") is False

    @pytest.mark.asyncio
    async def test_set_password_rehashes(self, store):
        user_id = await create_user(store)

        await store.set_password(user_id, "NewPassword2!")
        user = await store.get_by_id(user_id)

        assert user.is_password_correct("NewPassword2!")
        assert not user.is_password_correct("Wonderland1!")


class TestUserModel:

    @pytest.mark.asyncio
    async def test_public_dict_hides_secrets(self, store):
        user_id = await create_user(store)
        await store.set_refresh_token(user_id, "secret-token")

        public = (await store.get_by_id(user_id)).public_dict()

        assert public["id"] == user_id
        assert "hashed_password" not in public
        assert "refresh_token" not in public

    @pytest.mark.asyncio
    async def test_generated_tokens_identify_user(self, store):
        from app.core.security import decode_access_token, decode_refresh_token

        user_id = await create_user(store)
        user = await store.get_by_id(user_id)

        access = decode_access_token(user.generate_access_token())
        refresh = decode_refresh_token(user.generate_refresh_token())

        assert access["sub"] == refresh["sub"] == user_id
        assert access["username"] == "alice"

    def test_is_password_correct_without_hash(self):
        from app.models.user import User

        user = User(
            _id="507f1f77bcf86cd799439011",
            username="u",
            email="u@example.com",
            full_name="U",
            avatar="http://cdn/a.png",
        )

        assert user.is_password_correct("anything") is False
