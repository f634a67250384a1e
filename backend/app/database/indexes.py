"""
Index setup run on application startup.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database.databases import auth_db

logger = logging.getLogger(__name__)


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create necessary indexes for the auth database."""
    await auth_db.create_auth_indexes(db)
    logger.info("Indexes ensured on auth collections")
