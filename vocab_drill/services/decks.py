import logging
from typing import Any

from bson import ObjectId

from vocab_drill.db import get_db
from vocab_drill.models.deck import DeckMeta, DeckOut, FolderOut, deck_doc_to_meta, deck_doc_to_out
from vocab_drill.models.entry import VocabEntry
from vocab_drill.utils.time import now_local

logger = logging.getLogger(__name__)


async def list_folders(user_key: str) -> list[FolderOut]:
    docs = await get_db().folders.find({"userKey": user_key}).sort("createdAt", 1).to_list(length=None)
    return [FolderOut(id=str(doc["_id"]), name=doc.get("name") or str(doc["_id"])) for doc in docs]


async def create_folder(user_key: str, name: str) -> FolderOut:
    now = now_local()
    clean = name.strip()
    result = await get_db().folders.insert_one(
        {"userKey": user_key, "name": clean, "createdAt": now, "updatedAt": now}
    )
    return FolderOut(id=str(result.inserted_id), name=clean)


async def folder_exists(user_key: str, folder_id: ObjectId) -> bool:
    doc = await get_db().folders.find_one({"_id": folder_id, "userKey": user_key}, {"_id": 1})
    return doc is not None


async def delete_folder(user_key: str, folder_id: ObjectId) -> int:
    """Delete a folder and every deck saved in it; returns the number of decks removed."""
    db = get_db()
    removed = await db.decks.delete_many({"userKey": user_key, "folderId": folder_id})
    await db.folders.delete_one({"_id": folder_id, "userKey": user_key})
    return int(removed.deleted_count)


async def list_decks(user_key: str, folder_id: ObjectId) -> list[DeckMeta]:
    docs = (
        await get_db()
        .decks.find({"userKey": user_key, "folderId": folder_id}, {"data": 0})
        .sort("updatedAt", -1)
        .to_list(length=None)
    )
    return [deck_doc_to_meta(doc) for doc in docs]


async def save_deck(user_key: str, folder_id: ObjectId, name: str, entries: list[VocabEntry]) -> DeckMeta:
    now = now_local()
    doc: dict[str, Any] = {
        "userKey": user_key,
        "folderId": folder_id,
        "name": name.strip(),
        "rowCount": len(entries),
        "data": [entry.model_dump() for entry in entries],
        "createdAt": now,
        "updatedAt": now,
    }
    result = await get_db().decks.insert_one(doc)
    doc["_id"] = result.inserted_id
    return deck_doc_to_meta(doc)


async def get_deck(user_key: str, folder_id: ObjectId, deck_id: ObjectId) -> DeckOut | None:
    doc = await get_db().decks.find_one({"_id": deck_id, "userKey": user_key, "folderId": folder_id})
    if not doc:
        return None
    return deck_doc_to_out(doc)


async def delete_deck(user_key: str, folder_id: ObjectId, deck_id: ObjectId) -> bool:
    result = await get_db().decks.delete_one({"_id": deck_id, "userKey": user_key, "folderId": folder_id})
    return result.deleted_count > 0


async def collect_entries(user_key: str, folder_id: ObjectId, deck_ids: list[ObjectId]) -> list[VocabEntry]:
    """Concatenate the entries of several decks in the given order, skipping empty or missing ones."""
    entries: list[VocabEntry] = []
    for deck_id in deck_ids:
        deck = await get_deck(user_key, folder_id, deck_id)
        if deck is None or not deck.data:
            logger.warning("Deck %s in folder %s is empty or missing", deck_id, folder_id)
            continue
        entries.extend(deck.data)
    return entries
