from typing import Sequence

from vocab_drill.models.entry import Direction, VocabEntry, target_of
from vocab_drill.utils.random_utils import pick_n, shuffle

DISTRACTOR_COUNT = 3


def build_options(
    current: VocabEntry | None,
    working_list: Sequence[VocabEntry],
    direction: Direction,
    count: int = DISTRACTOR_COUNT,
) -> list[str]:
    """
    Multiple-choice options for ``current``: its target plus up to ``count``
    targets drawn from the working list, shuffled.

    Exclusion is by the first index holding the correct string, so entries
    sharing that translation can still contribute an equal option.
    """
    if current is None or not working_list:
        return []
    correct = target_of(current, direction)
    pool = [target_of(entry, direction) for entry in working_list]
    exclude = pool.index(correct) if correct in pool else None
    distractors = pick_n(pool, count, exclude)
    return shuffle([correct, *distractors])
