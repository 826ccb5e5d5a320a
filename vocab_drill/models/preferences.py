from typing import Literal

from pydantic import BaseModel

from vocab_drill.models.entry import Direction, Mode

Theme = Literal["light", "dark"]


class Preferences(BaseModel):
    mode: Mode = "flashcards"
    direction: Direction = "FR→EN"
    shuffle: bool = True
    theme: Theme = "light"


class PreferencesUpdate(BaseModel):
    mode: Mode | None = None
    direction: Direction | None = None
    shuffle: bool | None = None
    theme: Theme | None = None
