# backend/focusflow/db/mongo.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from focusflow.core.config import settings
from focusflow.core.errors import StoreConnectionError

logger = logging.getLogger(__name__)

client: Optional[AsyncIOMotorClient] = None
db = None

# Collections the live gateway needs; the startup probe checks for them.
REQUIRED_COLLECTIONS = ("focus_settings", "focus_sessions", "focus_streaks")


async def connect_to_mongo(uri: Optional[str] = None, db_name: Optional[str] = None):
    global client, db
    uri = uri or settings.MONGO_URI
    if not uri:
        raise StoreConnectionError("MONGO_URI is not configured")

    client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)
    db = client[db_name or settings.MONGO_DB_NAME]
    logger.info("MongoDB client created for database %r", db.name)
    return db


async def close_mongo_connection():
    global client, db
    if client:
        client.close()
        logger.info("MongoDB connection closed")
    client = None
    db = None


def get_db():
    """
    Current database handle. connect_to_mongo() (or a test) must have set it.
    """
    if db is None:
        raise StoreConnectionError("Database is not connected")
    return db


async def ping() -> bool:
    await get_db().command("ping")
    return True
