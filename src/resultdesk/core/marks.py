"""Normalisation of a single raw mark against a subject's full marks.

Marks arrive from hand entry and spreadsheet imports, so a cell can hold a
number, a numeric string, the absence token in any case, a blank, or garbage.
Every one of those maps to a SubjectScore; nothing here raises.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from resultdesk.core.errors import DataWarning, WarningCode
from resultdesk.core.grade_scale import NINE_POINT, GradeScale, grade_for

logger = logging.getLogger(__name__)

ABSENT_TOKEN = "AB"
NOT_ENTERED = "-"


class MarkKind(str, Enum):
    NUMERIC = "numeric"
    ABSENT = "absent"
    INVALID = "invalid"
    MISSING = "missing"


@dataclass(frozen=True)
class RawMark:
    kind: MarkKind
    value: Optional[float] = None
    text: str = ""

    @classmethod
    def parse(cls, raw: Any) -> "RawMark":
        if isinstance(raw, RawMark):
            return raw
        if raw is None:
            return cls(MarkKind.MISSING)
        if isinstance(raw, bool):
            return cls(MarkKind.INVALID, text=str(raw))
        if isinstance(raw, (int, float)):
            if math.isfinite(raw):
                return cls(MarkKind.NUMERIC, float(raw), str(raw))
            return cls(MarkKind.INVALID, text=str(raw))
        if isinstance(raw, str):
            text = raw.strip()
            if not text:
                return cls(MarkKind.MISSING)
            if text.upper() == ABSENT_TOKEN:
                return cls(MarkKind.ABSENT, text=ABSENT_TOKEN)
            try:
                value = float(text)
            except ValueError:
                return cls(MarkKind.INVALID, text=text)
            if not math.isfinite(value):
                return cls(MarkKind.INVALID, text=text)
            return cls(MarkKind.NUMERIC, value, text)
        return cls(MarkKind.INVALID, text=repr(raw))

    @classmethod
    def numeric(cls, value: float) -> "RawMark":
        return cls.parse(value)

    @classmethod
    def absent(cls) -> "RawMark":
        return cls(MarkKind.ABSENT, text=ABSENT_TOKEN)

    @classmethod
    def missing(cls) -> "RawMark":
        return cls(MarkKind.MISSING)


@dataclass(frozen=True)
class SubjectScore:
    subject: str
    obtained: float
    full: float
    percent: float
    grade: str
    is_absent: bool
    is_entered: bool = True
    raw: RawMark = RawMark(MarkKind.MISSING)
    warnings: Tuple[DataWarning, ...] = ()

    @property
    def display(self) -> Union[str, float, int]:
        if not self.is_entered:
            return NOT_ENTERED
        if self.is_absent:
            return ABSENT_TOKEN
        return format_number(self.obtained)


def format_number(value: float) -> Union[int, float]:
    if float(value).is_integer():
        return int(value)
    return value


def percent_of(obtained: float, full: float) -> float:
    if full > 0:
        return obtained * 100.0 / full
    return 0.0


def score(
    raw: Any,
    full_marks: float,
    scale: GradeScale = NINE_POINT,
    subject: str = "",
) -> SubjectScore:
    mark = RawMark.parse(raw)
    full = float(full_marks) if full_marks and full_marks > 0 else 0.0
    warnings = []
    is_absent = False
    is_entered = True
    obtained = 0.0

    if mark.kind is MarkKind.ABSENT:
        is_absent = True
    elif mark.kind is MarkKind.MISSING:
        is_absent = True
        is_entered = False
    elif mark.kind is MarkKind.INVALID:
        warnings.append(
            DataWarning(
                WarningCode.INVALID_MARK,
                f"Unreadable mark {mark.text!r} counted as 0",
                subject=subject or None,
            )
        )
    else:
        obtained = min(max(mark.value, 0.0), full)
        if obtained != mark.value:
            logger.debug("Clamped %s mark %s into [0, %s]", subject, mark.value, full)
            warnings.append(
                DataWarning(
                    WarningCode.MARK_OUT_OF_RANGE,
                    f"Mark {format_number(mark.value)} outside 0-{format_number(full)}, "
                    f"clamped to {format_number(obtained)}",
                    subject=subject or None,
                )
            )

    percent = percent_of(obtained, full)
    return SubjectScore(
        subject=subject,
        obtained=obtained,
        full=full,
        percent=percent,
        grade=grade_for(percent, scale),
        is_absent=is_absent,
        is_entered=is_entered,
        raw=mark,
        warnings=tuple(warnings),
    )
