from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from vocab_drill.config import validate_mongo_settings

# Created lazily: the drill runs without MongoDB when MONGO_URL/MONGO_DB are unset.
_client: AsyncIOMotorClient | None = None
_db: AsyncIOMotorDatabase | None = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        mongo_url = validate_mongo_settings().mongo_url
        _client = AsyncIOMotorClient(mongo_url, appname="vocab-drill", serverSelectionTimeoutMS=5000, tz_aware=True)
    return _client


def get_db() -> AsyncIOMotorDatabase:
    global _db
    if _db is None:
        _db = get_client().get_database(validate_mongo_settings().mongo_db)
    return _db


async def ping_db() -> None:
    await get_client().admin.command("ping")


async def create_indexes() -> None:
    db = get_db()
    await db.users.create_index([("userKey", ASCENDING)], unique=True, name="uq_users_user_key")
    await db.preferences.create_index([("userKey", ASCENDING)], unique=True, name="uq_preferences_user_key")
    await db.folders.create_index([("userKey", ASCENDING), ("createdAt", ASCENDING)], name="idx_folders_user_created")
    await db.decks.create_index(
        [("userKey", ASCENDING), ("folderId", ASCENDING), ("updatedAt", DESCENDING)],
        name="idx_decks_user_folder_updated",
    )


def close_client() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None
