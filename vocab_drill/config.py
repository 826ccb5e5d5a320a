import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    mongo_url: str
    mongo_db: str
    tz: str
    user_key: str
    log_level: str
    log_dir: str
    log_json: bool
    csv_delimiter: str
    advance_delay_ms: int
    qcm_correct_delay_ms: int
    qcm_wrong_delay_ms: int
    streak_milestone: int
    default_vocab_path: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    tz = (os.getenv("TZ") or "Europe/Paris").strip() or "Europe/Paris"
    return Settings(
        mongo_url=(os.getenv("MONGO_URL") or "").strip(),
        mongo_db=(os.getenv("MONGO_DB") or "").strip(),
        tz=tz,
        user_key=(os.getenv("DRILL_USER_KEY") or "local").strip() or "local",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        log_dir=(os.getenv("LOG_DIR") or "").strip(),
        log_json=_env_bool("LOG_JSON"),
        csv_delimiter=os.getenv("CSV_DELIMITER") or ";",
        advance_delay_ms=_env_int("ADVANCE_DELAY_MS", 800),
        qcm_correct_delay_ms=_env_int("QCM_CORRECT_DELAY_MS", 2000),
        qcm_wrong_delay_ms=_env_int("QCM_WRONG_DELAY_MS", 3500),
        streak_milestone=_env_int("STREAK_MILESTONE", 5),
        default_vocab_path=(os.getenv("DEFAULT_VOCAB_PATH") or "").strip(),
    )


def persistence_enabled(settings: Settings | None = None) -> bool:
    cfg = settings or get_settings()
    return bool(cfg.mongo_url and cfg.mongo_db)


def validate_mongo_settings(settings: Settings | None = None) -> Settings:
    cfg = settings or get_settings()
    if not persistence_enabled(cfg):
        raise RuntimeError(
            "Missing required env vars: MONGO_URL and MONGO_DB. "
            "Copy .env.example to .env and set both values to enable the folder library and remote streaks."
        )
    return cfg
