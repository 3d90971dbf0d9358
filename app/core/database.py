from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.config import Settings
from app.core.exceptions import StoreConnectionError
from app.core.logging import get_logger

logger = get_logger("core.database")


def get_mongo_client(settings: Settings) -> MongoClient:
    """Create a pooled client; no I/O happens until the first command"""
    return MongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
        tz_aware=True,
    )


def connect(settings: Settings) -> MongoClient:
    """
    Create a client and verify the server answers a ping.

    Raises:
        StoreConnectionError: The server could not be reached
    """
    client = get_mongo_client(settings)
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        raise StoreConnectionError(f"Could not connect to MongoDB: {e}") from e
    logger.info(f"MongoDB connected successfully (database: {settings.mongodb_database})")
    return client


def get_songs_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.mongodb_database][settings.mongodb_collection]
