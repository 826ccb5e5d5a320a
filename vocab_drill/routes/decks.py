from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException

from vocab_drill.config import persistence_enabled
from vocab_drill.models.deck import DeckCreate, DeckLoadRequest, DeckMeta, DeckOut, FolderCreate, FolderOut
from vocab_drill.models.session import LoadResult
from vocab_drill.services import decks
from vocab_drill.services.entry_normalizer import normalize_records
from vocab_drill.services.runtime import DrillRuntime, get_runtime

router = APIRouter(prefix="/folders", tags=["folders"])


def require_persistence() -> None:
    if not persistence_enabled():
        raise HTTPException(status_code=503, detail="Folder library requires MONGO_URL and MONGO_DB")


def _parse_object_id(raw: str) -> ObjectId:
    if not ObjectId.is_valid(raw):
        raise HTTPException(status_code=400, detail="Invalid ObjectId")
    return ObjectId(raw)


async def _existing_folder(user_key: str, raw: str) -> ObjectId:
    folder_id = _parse_object_id(raw)
    if not await decks.folder_exists(user_key, folder_id):
        raise HTTPException(status_code=404, detail="Folder not found")
    return folder_id


@router.get("", response_model=list[FolderOut], dependencies=[Depends(require_persistence)])
async def list_folders(runtime: DrillRuntime = Depends(get_runtime)):
    return await decks.list_folders(runtime.user_key)


@router.post("", response_model=FolderOut, dependencies=[Depends(require_persistence)])
async def create_folder(payload: FolderCreate, runtime: DrillRuntime = Depends(get_runtime)):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Folder name is empty")
    return await decks.create_folder(runtime.user_key, payload.name)


@router.delete("/{folder_id}", dependencies=[Depends(require_persistence)])
async def delete_folder(folder_id: str, runtime: DrillRuntime = Depends(get_runtime)):
    oid = await _existing_folder(runtime.user_key, folder_id)
    removed = await decks.delete_folder(runtime.user_key, oid)
    return {"deleted": True, "decksDeleted": removed}


@router.get("/{folder_id}/decks", response_model=list[DeckMeta], dependencies=[Depends(require_persistence)])
async def list_decks(folder_id: str, runtime: DrillRuntime = Depends(get_runtime)):
    oid = await _existing_folder(runtime.user_key, folder_id)
    return await decks.list_decks(runtime.user_key, oid)


@router.post("/{folder_id}/decks", response_model=DeckMeta, dependencies=[Depends(require_persistence)])
async def save_deck(folder_id: str, payload: DeckCreate, runtime: DrillRuntime = Depends(get_runtime)):
    oid = await _existing_folder(runtime.user_key, folder_id)
    entries, _ = normalize_records(payload.records)
    if not entries:
        raise HTTPException(status_code=400, detail="Deck has no valid entries")
    return await decks.save_deck(runtime.user_key, oid, payload.name, entries)


@router.get("/{folder_id}/decks/{deck_id}", response_model=DeckOut, dependencies=[Depends(require_persistence)])
async def get_deck(folder_id: str, deck_id: str, runtime: DrillRuntime = Depends(get_runtime)):
    oid = await _existing_folder(runtime.user_key, folder_id)
    deck = await decks.get_deck(runtime.user_key, oid, _parse_object_id(deck_id))
    if deck is None:
        raise HTTPException(status_code=404, detail="Deck not found")
    return deck


@router.delete("/{folder_id}/decks/{deck_id}", dependencies=[Depends(require_persistence)])
async def delete_deck(folder_id: str, deck_id: str, runtime: DrillRuntime = Depends(get_runtime)):
    oid = await _existing_folder(runtime.user_key, folder_id)
    if not await decks.delete_deck(runtime.user_key, oid, _parse_object_id(deck_id)):
        raise HTTPException(status_code=404, detail="Deck not found")
    return {"deleted": True}


@router.post("/{folder_id}/decks/load", response_model=LoadResult, dependencies=[Depends(require_persistence)])
async def load_decks(folder_id: str, payload: DeckLoadRequest, runtime: DrillRuntime = Depends(get_runtime)):
    oid = await _existing_folder(runtime.user_key, folder_id)
    deck_ids = [_parse_object_id(raw) for raw in payload.deckIds]

    async def fetch():
        return await decks.collect_entries(runtime.user_key, oid, deck_ids)

    return await runtime.loader.load(fetch, source=f"folder {folder_id}")
