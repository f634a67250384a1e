"""
Auth database configuration.
Stores user identity and authentication data.

The database name itself comes from settings (`mongo_db_name`).
"""
from motor.motor_asyncio import AsyncIOMotorDatabase


class Collections:
    """Collection names in the auth database."""
    USERS = "users"

    # Index definitions for each collection
    INDEXES = {
        "users": [
            {"keys": [("username", 1)], "unique": True},
            {"keys": [("email", 1)], "unique": True},
            {"keys": [("full_name", 1)]},
        ],
    }


async def create_auth_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for auth database collections."""
    for collection_name, indexes in Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            await collection.create_index(keys, **kwargs)
