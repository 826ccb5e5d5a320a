import logging
from typing import Any, Iterable, Mapping

from vocab_drill.config import Settings, get_settings
from vocab_drill.models.entry import (
    DIRECTIONS,
    MODES,
    Direction,
    EntryKey,
    Mode,
    Scope,
    VocabEntry,
    prompt_of,
    target_of,
)
from vocab_drill.models.preferences import Preferences, Theme
from vocab_drill.models.session import AnswerOutcome, ImportReport, Score, SessionSnapshot
from vocab_drill.services.entry_normalizer import normalize_records
from vocab_drill.services.quiz_modes import (
    BaseQuizMode,
    FlashcardMode,
    ModeMismatchError,
    QcmMode,
    WritingMode,
    create_mode,
)
from vocab_drill.signals import (
    answer_evaluated,
    best_streak_changed,
    list_changed,
    preferences_changed,
    session_perfect,
    streak_milestone,
)
from vocab_drill.utils.random_utils import clamp, shuffle

logger = logging.getLogger(__name__)


def _percent(part: int, whole: int) -> int:
    # half-up rounding of part / whole * 100
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


class DrillSession:
    """
    In-memory drill state for one local user.

    Holds the imported list, the working list derived from it (full or
    mistakes only, shuffled or not), the cursor, and the score/streak/mistake
    accumulators. Answer evaluation is delegated to the active quiz mode.
    """

    def __init__(
        self,
        preferences: Preferences | None = None,
        best_streak: int = 0,
        settings: Settings | None = None,
    ) -> None:
        prefs = preferences or Preferences()
        self.settings = settings or get_settings()
        self.mode: Mode = prefs.mode
        self.direction: Direction = prefs.direction
        self.shuffle: bool = prefs.shuffle
        self.theme: Theme = prefs.theme
        self.scope: Scope = "full"

        self.full_list: list[VocabEntry] = []
        self.working_list: list[VocabEntry] = []
        self._wrong: dict[EntryKey, VocabEntry] = {}

        self.position = 0
        self.score = Score()
        self.current_streak = 0
        self.best_streak = max(0, int(best_streak or 0))
        self.pending_advances = 0
        self.loading = False

        self.strategy: BaseQuizMode = create_mode(self.mode)

    # ── read side ────────────────────────────────────────────────────

    @property
    def wrong_list(self) -> list[VocabEntry]:
        return list(self._wrong.values())

    @property
    def current(self) -> VocabEntry | None:
        if not self.working_list:
            return None
        return self.working_list[self.position]

    @property
    def revealed(self) -> bool:
        return isinstance(self.strategy, FlashcardMode) and self.strategy.revealed

    @property
    def preferences(self) -> Preferences:
        return Preferences(mode=self.mode, direction=self.direction, shuffle=self.shuffle, theme=self.theme)

    def snapshot(self) -> SessionSnapshot:
        current = self.current
        size = len(self.working_list)
        return SessionSnapshot(
            mode=self.mode,
            direction=self.direction,
            shuffle=self.shuffle,
            scope=self.scope,
            current=current,
            prompt=prompt_of(current, self.direction) if current else None,
            position=self.position,
            size=size,
            fullSize=len(self.full_list),
            progress=_percent(self.position + 1, size) if size else 0,
            accuracy=_percent(self.score.correct, self.score.total),
            score=self.score.model_copy(),
            currentStreak=self.current_streak,
            bestStreak=self.best_streak,
            mistakes=len(self._wrong),
            revealed=self.revealed,
            phase=self.strategy.phase,
            pendingAdvance=self.pending_advances > 0,
            loading=self.loading,
        )

    def options(self) -> list[str]:
        return list(self._require(QcmMode).options)

    # ── list management ──────────────────────────────────────────────

    def import_entries(self, records: Iterable[Mapping[str, Any] | VocabEntry]) -> ImportReport:
        raw = [record.model_dump() if isinstance(record, VocabEntry) else record for record in records]
        entries, rejected = normalize_records(raw)
        if not entries:
            logger.info("Import produced no valid entries (%d rejected); keeping current list", rejected)
            return ImportReport(status="empty", accepted=0, rejected=rejected)

        self.full_list = entries
        self._wrong = {}
        self.scope = "full"
        self._rebuild_working_list()
        self._reset_progress()
        logger.info("Imported %d entries (%d rejected)", len(entries), rejected)
        list_changed.send(self, reason="import", size=len(self.working_list))
        return ImportReport(status="ok", accepted=len(entries), rejected=rejected)

    def set_shuffle(self, flag: bool) -> None:
        self.shuffle = bool(flag)
        self._rebuild_working_list()
        self.position = clamp(self.position, 0, max(len(self.working_list) - 1, 0))
        self.strategy.reset()
        self._prepare_strategy()
        list_changed.send(self, reason="shuffle", size=len(self.working_list))
        preferences_changed.send(self, preferences=self.preferences)

    def set_scope(self, scope: Scope) -> bool:
        if scope not in ("full", "wrong"):
            raise ValueError(f"Unknown scope: {scope!r}")
        if scope == "wrong" and not self._wrong:
            return False
        self.scope = scope
        self._rebuild_working_list()
        self._reset_progress()
        list_changed.send(self, reason="scope", size=len(self.working_list))
        return True

    def restart(self, full: bool = False) -> None:
        if full:
            self.scope = "full"
            self._rebuild_working_list()
            list_changed.send(self, reason="restart", size=len(self.working_list))
        self._reset_progress()

    # ── settings ─────────────────────────────────────────────────────

    def set_mode(self, mode: Mode) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown quiz mode: {mode!r}")
        self.mode = mode
        self.strategy = create_mode(mode)
        self._reset_progress()
        preferences_changed.send(self, preferences=self.preferences)

    def set_direction(self, direction: Direction) -> None:
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction!r}")
        self.direction = direction
        self._reset_progress()
        preferences_changed.send(self, preferences=self.preferences)

    def set_theme(self, theme: Theme) -> None:
        if theme not in ("light", "dark"):
            raise ValueError(f"Unknown theme: {theme!r}")
        self.theme = theme
        preferences_changed.send(self, preferences=self.preferences)

    def merge_best_streak(self, remote: int | None) -> int:
        if remote is not None and remote > self.best_streak:
            self.best_streak = int(remote)
        return self.best_streak

    # ── navigation ───────────────────────────────────────────────────

    def jump_to(self, index: int) -> None:
        self.position = clamp(int(index), 0, max(len(self.working_list) - 1, 0))
        self.strategy.reset()
        self._prepare_strategy()

    def next(self) -> None:
        self.jump_to(self.position + 1)

    def previous(self) -> None:
        self.jump_to(self.position - 1)

    def advance(self) -> bool:
        """Apply one scheduled advancement; False when none is pending."""
        if self.pending_advances <= 0:
            return False
        self.pending_advances -= 1
        self.jump_to(self.position + 1)
        return True

    # ── answering ────────────────────────────────────────────────────

    def reveal_answer(self) -> None:
        self._require(FlashcardMode).reveal()

    def self_report(self, knew: bool) -> AnswerOutcome:
        return self._answer(self._require(FlashcardMode), knew)

    def choose_option(self, option: str) -> AnswerOutcome:
        return self._answer(self._require(QcmMode), option)

    def submit_text(self, text: str) -> AnswerOutcome:
        return self._answer(self._require(WritingMode), text)

    def submit_answer(self, correct: bool) -> AnswerOutcome:
        """
        Record a verdict for the current entry.

        Score, streak, best streak and mistakes change immediately. Moving
        to the next entry is left pending: the caller applies it with
        ``advance()`` once ``advanceAfterMs`` has elapsed.
        """
        current = self.current
        if current is None or self.strategy.answered:
            return AnswerOutcome(accepted=False)
        self.strategy.mark_answered()

        self.score.total += 1
        if correct:
            self.score.correct += 1
            self.current_streak += 1
        else:
            self.current_streak = 0

        if self.current_streak > self.best_streak:
            self.best_streak = self.current_streak
            best_streak_changed.send(self, best=self.best_streak)

        if not correct and current.key not in self._wrong:
            self._wrong[current.key] = current

        expected = target_of(current, self.direction)
        answer_evaluated.send(self, correct=bool(correct), entry=current, expected=expected)

        milestone = self.settings.streak_milestone
        if correct and milestone > 0 and self.current_streak % milestone == 0:
            logger.info("Streak milestone reached: %d", self.current_streak)
            streak_milestone.send(self, streak=self.current_streak)

        size = len(self.working_list)
        perfect = self.score.total == size and self.score.correct == size
        if perfect:
            session_perfect.send(self, total=size)

        self.pending_advances += 1
        return AnswerOutcome(
            accepted=True,
            correct=bool(correct),
            expected=expected,
            advanceAfterMs=self._advance_delay(bool(correct)),
            perfect=perfect,
        )

    # ── internals ────────────────────────────────────────────────────

    def _answer(self, strategy: BaseQuizMode, response: Any) -> AnswerOutcome:
        current = self.current
        if current is None or strategy.answered:
            return AnswerOutcome(accepted=False)
        return self.submit_answer(strategy.evaluate(current, self.direction, response))

    def _require(self, mode_class: type[BaseQuizMode]) -> Any:
        if not isinstance(self.strategy, mode_class):
            raise ModeMismatchError(f"Operation requires {mode_class.mode_id!r} mode, current mode is {self.mode!r}")
        return self.strategy

    def _advance_delay(self, correct: bool) -> int:
        if self.mode == "qcm":
            return self.settings.qcm_correct_delay_ms if correct else self.settings.qcm_wrong_delay_ms
        return self.settings.advance_delay_ms

    def _rebuild_working_list(self) -> None:
        source = self.full_list if self.scope == "full" else self.wrong_list
        self.working_list = shuffle(source) if self.shuffle else list(source)

    def _reset_progress(self) -> None:
        self.position = 0
        self.score = Score()
        self.current_streak = 0
        self.pending_advances = 0
        self.strategy.reset()
        self._prepare_strategy()

    def _prepare_strategy(self) -> None:
        self.strategy.prepare(self.current, self.working_list, self.direction)
