import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def clamp(value: int, min_value: int, max_value: int) -> int:
    return max(min_value, min(max_value, value))


def shuffle(items: Sequence[T]) -> list[T]:
    """Fisher-Yates over a copy; the input is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = random.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def pick_n(pool: Sequence[T], n: int, exclude_index: int | None = None) -> list[T]:
    """
    Draw up to ``n`` elements of ``pool`` without replacement.

    ``exclude_index`` removes one position, not one value: duplicates of the
    excluded value at other positions stay eligible.
    """
    indexes = [i for i in range(len(pool)) if i != exclude_index]
    for i in range(len(indexes) - 1, 0, -1):
        j = random.randint(0, i)
        indexes[i], indexes[j] = indexes[j], indexes[i]
    return [pool[i] for i in indexes[: max(0, min(n, len(indexes)))]]
