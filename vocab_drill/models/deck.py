from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from vocab_drill.models.entry import VocabEntry


class FolderCreate(BaseModel):
    name: str = Field(min_length=1)


class FolderOut(BaseModel):
    id: str
    name: str


class DeckCreate(BaseModel):
    name: str = Field(min_length=1)
    records: list[dict[str, Any]] = Field(default_factory=list)


class DeckMeta(BaseModel):
    id: str
    name: str
    rowCount: int


class DeckOut(DeckMeta):
    data: list[VocabEntry] = Field(default_factory=list)
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class DeckLoadRequest(BaseModel):
    deckIds: list[str] = Field(min_length=1)


def deck_doc_to_meta(doc: dict[str, Any]) -> DeckMeta:
    return DeckMeta(
        id=str(doc["_id"]),
        name=doc.get("name") or str(doc["_id"]),
        rowCount=int(doc.get("rowCount", 0) or 0),
    )


def deck_doc_to_out(doc: dict[str, Any]) -> DeckOut:
    return DeckOut(
        id=str(doc["_id"]),
        name=doc.get("name") or str(doc["_id"]),
        rowCount=int(doc.get("rowCount", 0) or 0),
        data=[VocabEntry(**row) for row in doc.get("data", []) or []],
        createdAt=doc.get("createdAt"),
        updatedAt=doc.get("updatedAt"),
    )
