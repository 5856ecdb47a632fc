import math
from dataclasses import dataclass
from typing import Dict, Tuple

from resultdesk.core.errors import InvalidArgument


NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class GradeScale:
    name: str
    boundaries: Tuple[Tuple[float, str], ...]
    floor_label: str

    def __post_init__(self) -> None:
        previous = math.inf
        for minimum, label in self.boundaries:
            if not label:
                raise InvalidArgument(f"Empty grade label in scale {self.name!r}")
            if minimum >= previous:
                raise InvalidArgument(f"Boundaries of scale {self.name!r} must be strictly descending")
            previous = minimum
        if not self.floor_label:
            raise InvalidArgument(f"Scale {self.name!r} needs a floor label")

    def grade_for(self, percent: float) -> str:
        return grade_for(percent, self)


# Printed report cards.
NINE_POINT = GradeScale(
    name="nine_point",
    boundaries=(
        (90, "A1"),
        (80, "A2"),
        (70, "B1"),
        (60, "B2"),
        (50, "C1"),
        (40, "C2"),
        (33, "D"),
    ),
    floor_label="E (Needs Improvement)",
)

# Public result lookup.
LETTER = GradeScale(
    name="letter",
    boundaries=(
        (90, "A+"),
        (80, "A"),
        (70, "B+"),
        (60, "B"),
        (50, "C"),
        (40, "D"),
    ),
    floor_label="F",
)

SCALES: Dict[str, GradeScale] = {
    NINE_POINT.name: NINE_POINT,
    LETTER.name: LETTER,
}


def grade_for(percent: float, scale: GradeScale) -> str:
    if isinstance(percent, bool) or not isinstance(percent, (int, float)):
        return NOT_AVAILABLE
    if math.isnan(percent):
        return NOT_AVAILABLE
    for minimum, label in scale.boundaries:
        if percent >= minimum:
            return label
    return scale.floor_label


def get_scale(name: str) -> GradeScale:
    key = str(name or "").strip().lower().replace("-", "_")
    try:
        return SCALES[key]
    except KeyError as exc:
        raise InvalidArgument(f"Unknown grade scale: {name}") from exc
