import logging
from typing import Any

from vocab_drill.config import Settings, get_settings
from vocab_drill.models.session import LoadResult
from vocab_drill.services.loader import EntryLoader
from vocab_drill.services.preferences import (
    BasePreferenceStore,
    get_preference_store,
    load_preferences,
    save_preferences,
)
from vocab_drill.services.session import DrillSession
from vocab_drill.services.streak_store import (
    BaseStreakStore,
    get_streak_store,
    push_best_streak,
    sync_best_streak,
)
from vocab_drill.signals import best_streak_changed, preferences_changed
from vocab_drill.utils.tabular import decode_delimited

logger = logging.getLogger(__name__)

_runtime: "DrillRuntime | None" = None


class DrillRuntime:
    """
    The process-wide session plus its persistence collaborators.

    Signal handlers only mark what changed; ``flush`` performs the writes so
    callers decide when to await them.
    """

    def __init__(
        self,
        session: DrillSession,
        streak_store: BaseStreakStore,
        preference_store: BasePreferenceStore,
        user_key: str,
    ) -> None:
        self.session = session
        self.loader = EntryLoader(session)
        self.streak_store = streak_store
        self.preference_store = preference_store
        self.user_key = user_key
        self._prefs_dirty = False
        self._best_dirty = False
        preferences_changed.connect(self._on_preferences_changed, sender=session)
        best_streak_changed.connect(self._on_best_streak_changed, sender=session)

    @classmethod
    async def create(
        cls,
        settings: Settings | None = None,
        streak_store: BaseStreakStore | None = None,
        preference_store: BasePreferenceStore | None = None,
    ) -> "DrillRuntime":
        cfg = settings or get_settings()
        streaks = streak_store or get_streak_store()
        prefs_store = preference_store or get_preference_store()

        prefs = await load_preferences(prefs_store, cfg.user_key)
        session = DrillSession(preferences=prefs, settings=cfg)
        session.merge_best_streak(await sync_best_streak(streaks, cfg.user_key, session.best_streak))
        logger.info(
            "Session ready for %s: mode=%s direction=%s shuffle=%s best=%d",
            cfg.user_key,
            session.mode,
            session.direction,
            session.shuffle,
            session.best_streak,
        )
        return cls(session, streaks, prefs_store, cfg.user_key)

    def _on_preferences_changed(self, sender: Any, **kwargs: Any) -> None:
        self._prefs_dirty = True

    def _on_best_streak_changed(self, sender: Any, **kwargs: Any) -> None:
        self._best_dirty = True

    async def load_default_list(self, path: str, delimiter: str = ";") -> LoadResult:
        """Seed the session from a delimited file; failures and empty files leave it as it was."""

        async def fetch():
            with open(path, encoding="utf-8") as handle:
                text = handle.read()
            return decode_delimited(text, delimiter=delimiter)

        result = await self.loader.load(fetch, source=path)
        if result.status == "empty":
            logger.warning("Default list %s has no valid entries", path)
        elif result.status == "ok":
            logger.info("Default list %s loaded: %d entries", path, result.report.accepted)
        return result

    async def flush(self) -> None:
        if self._prefs_dirty:
            self._prefs_dirty = False
            await save_preferences(self.preference_store, self.user_key, self.session.preferences)
        if self._best_dirty:
            self._best_dirty = False
            await push_best_streak(self.streak_store, self.user_key, self.session.best_streak)

    def close(self) -> None:
        preferences_changed.disconnect(self._on_preferences_changed, sender=self.session)
        best_streak_changed.disconnect(self._on_best_streak_changed, sender=self.session)


def set_runtime(runtime: DrillRuntime | None) -> None:
    global _runtime
    if _runtime is not None and _runtime is not runtime:
        _runtime.close()
    _runtime = runtime


def get_runtime() -> DrillRuntime:
    if _runtime is None:
        raise RuntimeError("Drill runtime is not initialized; start the app through its lifespan.")
    return _runtime
