from typing import Any, Literal

from pydantic import BaseModel, Field

from vocab_drill.models.entry import Direction, Mode, Scope, VocabEntry

Phase = Literal["unanswered", "answered"]


class Score(BaseModel):
    correct: int = 0
    total: int = 0


class SessionSnapshot(BaseModel):
    mode: Mode
    direction: Direction
    shuffle: bool
    scope: Scope
    current: VocabEntry | None
    prompt: str | None
    position: int
    size: int
    fullSize: int
    progress: int
    accuracy: int
    score: Score
    currentStreak: int
    bestStreak: int
    mistakes: int
    revealed: bool
    phase: Phase
    pendingAdvance: bool
    loading: bool


class AnswerOutcome(BaseModel):
    accepted: bool
    correct: bool | None = None
    expected: str | None = None
    advanceAfterMs: int | None = None
    perfect: bool = False


class ImportReport(BaseModel):
    status: Literal["ok", "empty"]
    accepted: int
    rejected: int


class LoadResult(BaseModel):
    status: Literal["ok", "empty", "failed", "superseded"]
    report: ImportReport | None = None
    detail: str | None = None


class ImportRequest(BaseModel):
    records: list[dict[str, Any]] = Field(default_factory=list)


class CsvImportRequest(BaseModel):
    text: str
    delimiter: str | None = Field(default=None, min_length=1, max_length=1)


class ModeRequest(BaseModel):
    mode: Mode


class DirectionRequest(BaseModel):
    direction: Direction


class ShuffleRequest(BaseModel):
    shuffle: bool


class ScopeRequest(BaseModel):
    scope: Scope


class RestartRequest(BaseModel):
    full: bool = False


class JumpRequest(BaseModel):
    index: int


class FlashcardAnswerRequest(BaseModel):
    knew: bool


class QcmAnswerRequest(BaseModel):
    option: str


class WritingAnswerRequest(BaseModel):
    text: str


class OptionsOut(BaseModel):
    options: list[str] = Field(default_factory=list)
    answered: bool
    selected: str | None = None
