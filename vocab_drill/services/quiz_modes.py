"""
Quiz mode strategies.

Each mode owns the per-entry answer state (``unanswered`` -> ``answered``)
and knows how to turn a learner response into a verdict. Scoring itself
stays in the session; a mode only says whether the answer was right.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from vocab_drill.models.entry import Direction, Mode, VocabEntry, target_of
from vocab_drill.models.session import Phase
from vocab_drill.services.distractors import build_options
from vocab_drill.utils.normalize import normalize_answer


class ModeMismatchError(ValueError):
    pass


class BaseQuizMode(ABC):
    mode_id: Mode

    def __init__(self) -> None:
        self.phase: Phase = "unanswered"

    @property
    def answered(self) -> bool:
        return self.phase == "answered"

    def mark_answered(self) -> None:
        self.phase = "answered"

    def reset(self) -> None:
        """Back to ``unanswered`` for the entry now under the cursor."""
        self.phase = "unanswered"

    def prepare(self, current: VocabEntry | None, working_list: Sequence[VocabEntry], direction: Direction) -> None:
        """Called whenever the current entry, the working list or the direction changes."""

    @abstractmethod
    def evaluate(self, entry: VocabEntry, direction: Direction, response: Any) -> bool:
        ...


class FlashcardMode(BaseQuizMode):
    """Reveal, then the learner reports whether they knew it."""

    mode_id: Mode = "flashcards"

    def __init__(self) -> None:
        super().__init__()
        self.revealed = False

    def reset(self) -> None:
        super().reset()
        self.revealed = False

    def reveal(self) -> None:
        self.revealed = True

    def evaluate(self, entry: VocabEntry, direction: Direction, response: Any) -> bool:
        return bool(response)


class QcmMode(BaseQuizMode):
    """Pick one option among the target and up to three distractors."""

    mode_id: Mode = "qcm"

    def __init__(self) -> None:
        super().__init__()
        self.options: list[str] = []
        self.selected: str | None = None

    def reset(self) -> None:
        super().reset()
        self.selected = None

    def prepare(self, current: VocabEntry | None, working_list: Sequence[VocabEntry], direction: Direction) -> None:
        self.options = build_options(current, working_list, direction)

    def evaluate(self, entry: VocabEntry, direction: Direction, response: Any) -> bool:
        self.selected = str(response)
        # options are verbatim dataset strings, no normalization
        return self.selected == target_of(entry, direction)


class WritingMode(BaseQuizMode):
    """Free text, compared case-insensitively after trimming."""

    mode_id: Mode = "writing"

    def __init__(self) -> None:
        super().__init__()
        self.typed = ""

    def reset(self) -> None:
        super().reset()
        self.typed = ""

    def evaluate(self, entry: VocabEntry, direction: Direction, response: Any) -> bool:
        self.typed = str(response or "")
        return normalize_answer(self.typed) == normalize_answer(target_of(entry, direction))


_MODES: dict[str, type[BaseQuizMode]] = {
    cls.mode_id: cls for cls in (FlashcardMode, QcmMode, WritingMode)
}


def create_mode(mode: str) -> BaseQuizMode:
    mode_class = _MODES.get(mode)
    if mode_class is None:
        raise ValueError(f"Unknown quiz mode: {mode!r}. Available: {list(_MODES)}")
    return mode_class()


def available_modes() -> list[str]:
    return list(_MODES)
