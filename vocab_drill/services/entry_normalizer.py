import logging
from typing import Any, Iterable, Mapping

from vocab_drill.models.entry import VocabEntry
from vocab_drill.utils.normalize import clean_cell, normalize_header

logger = logging.getLogger(__name__)


def normalize_record(record: Mapping[Any, Any] | None) -> VocabEntry | None:
    """Map one decoded row to a VocabEntry, or None when EN and FR are both blank."""
    if not record:
        return None
    fields = {normalize_header(key): value for key, value in record.items()}
    en = clean_cell(fields.get("EN"))
    fr = clean_cell(fields.get("FR"))
    eg = clean_cell(fields.get("EG"))
    if not en and not fr:
        return None
    return VocabEntry(EN=en, FR=fr, EG=eg)


def normalize_records(records: Iterable[Mapping[Any, Any] | None]) -> tuple[list[VocabEntry], int]:
    entries: list[VocabEntry] = []
    rejected = 0
    for record in records:
        entry = normalize_record(record)
        if entry is None:
            rejected += 1
            continue
        entries.append(entry)
    if rejected:
        logger.debug("Dropped %d record(s) with neither EN nor FR", rejected)
    return entries, rejected
