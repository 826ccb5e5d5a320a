from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from vocab_drill.config import get_settings


@lru_cache(maxsize=1)
def local_zone() -> tzinfo:
    """Zone used for document timestamps; falls back to a fixed CET offset without tzdata."""
    try:
        return ZoneInfo(get_settings().tz)
    except ZoneInfoNotFoundError:
        return timezone(timedelta(hours=1), name="CET")


def now_local() -> datetime:
    return datetime.now(local_zone())
