"""Competition-style ("1224") class ranking.

Students are ordered by raw total marks, not percentage. Ties share a rank and
the next distinct total skips ahead by the number of tied students. Tied
students are listed by roll number (missing rolls last), then student id, so
repeated renders of the same class never reorder.
"""

from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from resultdesk.core.exam import ExamResult

T = TypeVar("T")


def tie_key(student_id: Any, roll: Optional[int]) -> Tuple[bool, int, str]:
    return (roll is None, roll if roll is not None else 0, str(student_id))


def _rank_key(total: float) -> float:
    # Marks are entered to at most a few decimals; anything finer is float noise.
    return round(total, 6)


def competition_ranks(
    items: Iterable[T],
    score: Callable[[T], float],
    tie: Callable[[T], Any],
) -> List[Tuple[T, int]]:
    ordered = sorted(items, key=lambda item: (-_rank_key(score(item)), tie(item)))
    ranked: List[Tuple[T, int]] = []
    rank = 0
    previous = None
    for position, item in enumerate(ordered, start=1):
        value = _rank_key(score(item))
        if previous is None or value != previous:
            rank = position
            previous = value
        ranked.append((item, rank))
    return ranked


def rank_label(rank: Optional[int], class_size: Optional[int]) -> Optional[str]:
    if rank is None or class_size is None:
        return None
    return f"{rank}/{class_size}"


def rank_class(results: Sequence[ExamResult]) -> List[ExamResult]:
    class_size = len(results)
    ranked = competition_ranks(
        results,
        score=lambda r: r.total_obtained,
        tie=lambda r: tie_key(r.student_id, r.roll),
    )
    return [result.with_rank(rank, class_size) for result, rank in ranked]
