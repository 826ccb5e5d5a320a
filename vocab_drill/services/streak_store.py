import logging

from vocab_drill.config import persistence_enabled
from vocab_drill.db import get_db
from vocab_drill.utils.time import now_local

logger = logging.getLogger(__name__)


class BaseStreakStore:
    store_name = "base"

    async def load_best_streak(self, user_key: str) -> int | None:
        raise NotImplementedError

    async def save_best_streak(self, user_key: str, value: int) -> None:
        raise NotImplementedError


class MemoryStreakStore(BaseStreakStore):
    store_name = "memory"

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        self._values: dict[str, int] = dict(initial or {})

    async def load_best_streak(self, user_key: str) -> int | None:
        return self._values.get(user_key)

    async def save_best_streak(self, user_key: str, value: int) -> None:
        self._values[user_key] = max(self._values.get(user_key, 0), int(value))


class MongoStreakStore(BaseStreakStore):
    store_name = "mongo"

    async def load_best_streak(self, user_key: str) -> int | None:
        doc = await get_db().users.find_one({"userKey": user_key}, {"bestStreak": 1})
        if not doc or not isinstance(doc.get("bestStreak"), int):
            return None
        return int(doc["bestStreak"])

    async def save_best_streak(self, user_key: str, value: int) -> None:
        now = now_local()
        # $max never lowers a stored record
        await get_db().users.update_one(
            {"userKey": user_key},
            {
                "$max": {"bestStreak": int(value)},
                "$set": {"updatedAt": now},
                "$setOnInsert": {"createdAt": now},
            },
            upsert=True,
        )


async def sync_best_streak(store: BaseStreakStore, user_key: str, local: int) -> int:
    """
    Merge the remote record into ``local``: returns ``max(local, remote)``.

    A missing remote record is created from the local value. Store failures
    are logged and leave the local value in place.
    """
    try:
        remote = await store.load_best_streak(user_key)
        if remote is None:
            await store.save_best_streak(user_key, local)
            return local
        return max(local, remote)
    except Exception as exc:
        logger.warning("Failed to load best streak for %s from %s store: %s", user_key, store.store_name, exc)
        return local


async def push_best_streak(store: BaseStreakStore, user_key: str, value: int) -> bool:
    try:
        await store.save_best_streak(user_key, value)
        return True
    except Exception as exc:
        logger.warning("Failed to save best streak for %s to %s store: %s", user_key, store.store_name, exc)
        return False


def get_streak_store() -> BaseStreakStore:
    if persistence_enabled():
        return MongoStreakStore()
    return MemoryStreakStore()
