from typing import Literal

from pydantic import BaseModel, ConfigDict

Direction = Literal["FR→EN", "EN→FR"]
Mode = Literal["flashcards", "qcm", "writing"]
Scope = Literal["full", "wrong"]

DIRECTIONS: tuple[Direction, ...] = ("FR→EN", "EN→FR")
MODES: tuple[Mode, ...] = ("flashcards", "qcm", "writing")

EntryKey = tuple[str, str]


class VocabEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    EN: str
    FR: str
    EG: str = ""

    @property
    def key(self) -> EntryKey:
        # EG is not part of the identity
        return (self.EN, self.FR)


def prompt_of(entry: VocabEntry, direction: Direction) -> str:
    return entry.FR if direction == "FR→EN" else entry.EN


def target_of(entry: VocabEntry, direction: Direction) -> str:
    return entry.EN if direction == "FR→EN" else entry.FR
