import logging

from pydantic import ValidationError

from vocab_drill.config import persistence_enabled
from vocab_drill.db import get_db
from vocab_drill.models.preferences import Preferences
from vocab_drill.utils.time import now_local

logger = logging.getLogger(__name__)

PREFERENCE_KEYS = ("mode", "direction", "shuffle", "theme")


def _to_strings(prefs: Preferences) -> dict[str, str]:
    return {
        "mode": prefs.mode,
        "direction": prefs.direction,
        "shuffle": "true" if prefs.shuffle else "false",
        "theme": prefs.theme,
    }


def _from_strings(raw: dict[str, str | None]) -> Preferences:
    """Stored values are opaque strings; anything unreadable falls back to its default."""
    defaults = Preferences()
    values = defaults.model_dump()
    for key in ("mode", "direction", "theme"):
        value = raw.get(key)
        if value is None:
            continue
        try:
            values[key] = getattr(Preferences(**{key: value}), key)
        except ValidationError:
            logger.debug("Ignoring stored %s=%r", key, value)
    shuffle = raw.get("shuffle")
    if shuffle is not None:
        # anything other than an explicit "false" keeps shuffle on
        values["shuffle"] = shuffle.strip().lower() != "false"
    return Preferences(**values)


class BasePreferenceStore:
    store_name = "base"

    async def get(self, user_key: str, key: str) -> str | None:
        raise NotImplementedError

    async def set(self, user_key: str, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryPreferenceStore(BasePreferenceStore):
    store_name = "memory"

    def __init__(self) -> None:
        self._values: dict[tuple[str, str], str] = {}

    async def get(self, user_key: str, key: str) -> str | None:
        return self._values.get((user_key, key))

    async def set(self, user_key: str, key: str, value: str) -> None:
        self._values[(user_key, key)] = value


class MongoPreferenceStore(BasePreferenceStore):
    store_name = "mongo"

    async def get(self, user_key: str, key: str) -> str | None:
        doc = await get_db().preferences.find_one({"userKey": user_key}, {"values": 1})
        value = ((doc or {}).get("values") or {}).get(key)
        return str(value) if value is not None else None

    async def set(self, user_key: str, key: str, value: str) -> None:
        now = now_local()
        await get_db().preferences.update_one(
            {"userKey": user_key},
            {"$set": {f"values.{key}": value, "updatedAt": now}, "$setOnInsert": {"createdAt": now}},
            upsert=True,
        )


async def load_preferences(store: BasePreferenceStore, user_key: str) -> Preferences:
    try:
        raw = {key: await store.get(user_key, key) for key in PREFERENCE_KEYS}
    except Exception as exc:
        logger.warning("Failed to read preferences for %s from %s store: %s", user_key, store.store_name, exc)
        return Preferences()
    return _from_strings(raw)


async def save_preferences(store: BasePreferenceStore, user_key: str, prefs: Preferences) -> bool:
    try:
        for key, value in _to_strings(prefs).items():
            await store.set(user_key, key, value)
        return True
    except Exception as exc:
        logger.warning("Failed to save preferences for %s to %s store: %s", user_key, store.store_name, exc)
        return False


def get_preference_store() -> BasePreferenceStore:
    if persistence_enabled():
        return MongoPreferenceStore()
    return MemoryPreferenceStore()
