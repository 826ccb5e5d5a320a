import dataclasses
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId

from vocab_drill.config import Settings, get_settings
from vocab_drill.services.session import DrillSession


def make_settings(**overrides: Any) -> Settings:
    base = Settings(
        mongo_url="",
        mongo_db="",
        tz="Europe/Paris",
        user_key="tester",
        log_level="INFO",
        log_dir="",
        log_json=False,
        csv_delimiter=";",
        advance_delay_ms=800,
        qcm_correct_delay_ms=2000,
        qcm_wrong_delay_ms=3500,
        streak_milestone=5,
        default_vocab_path="",
    )
    return dataclasses.replace(base, **overrides)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def records() -> list[dict[str, str]]:
    return [
        {"EN": "cat", "FR": "chat"},
        {"EN": "dog", "FR": "chien"},
        {"EN": "bird", "FR": "oiseau"},
        {"EN": "fish", "FR": "poisson"},
    ]


@pytest.fixture
def make_session(settings):
    def _make(records=None, mode="writing", direction="FR→EN", shuffle=False) -> DrillSession:
        from vocab_drill.models.preferences import Preferences

        session = DrillSession(
            preferences=Preferences(mode=mode, direction=direction, shuffle=shuffle),
            settings=settings,
        )
        if records:
            session.import_entries(records)
        return session

    return _make


@pytest.fixture
def no_mongo(monkeypatch):
    monkeypatch.delenv("MONGO_URL", raising=False)
    monkeypatch.delenv("MONGO_DB", raising=False)
    monkeypatch.delenv("DEFAULT_VOCAB_PATH", raising=False)
    monkeypatch.delenv("LOG_JSON", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ── minimal in-memory stand-in for the motor collections used by the deck library ──


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


def _project(doc: dict[str, Any], projection: dict[str, int] | None) -> dict[str, Any]:
    if not projection:
        return dict(doc)
    if all(flag == 0 for flag in projection.values()):
        return {k: v for k, v in doc.items() if k not in projection}
    return {k: v for k, v in doc.items() if k in projection or k == "_id"}


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]):
        self._docs = docs

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self._docs.sort(key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    def __init__(self):
        self.docs: list[dict[str, Any]] = []

    def find(self, query: dict[str, Any], projection: dict[str, int] | None = None) -> FakeCursor:
        return FakeCursor([_project(doc, projection) for doc in self.docs if _matches(doc, query)])

    async def find_one(self, query: dict[str, Any], projection: dict[str, int] | None = None):
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def insert_one(self, doc: dict[str, Any]):
        stored = dict(doc)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def delete_one(self, query: dict[str, Any]):
        for index, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]):
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        removed = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=removed)


class FakeDb:
    def __init__(self):
        self.folders = FakeCollection()
        self.decks = FakeCollection()


@pytest.fixture
def fake_db(monkeypatch) -> FakeDb:
    db = FakeDb()
    monkeypatch.setattr("vocab_drill.services.decks.get_db", lambda: db)
    return db
