"""Cumulative results across terms.

A term with no data for a student is skipped, not counted as zero out of full
marks. Counting it would pull the student's percentage down for a term they
never sat; leaving its full marks out keeps the cumulative percentage a fair
average of the terms that were actually recorded.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from resultdesk.core.errors import InvalidArgument
from resultdesk.core.exam import ExamResult
from resultdesk.core.grade_scale import NINE_POINT, GradeScale, grade_for
from resultdesk.core.marks import percent_of
from resultdesk.core.ranking import competition_ranks, rank_label, tie_key


@dataclass(frozen=True)
class SubjectTotal:
    subject: str
    obtained: float
    full: float
    percent: float
    grade: str


@dataclass(frozen=True)
class OverallResult:
    student_id: Any
    terms: Tuple[ExamResult, ...]
    cumulative_obtained: float
    cumulative_full: float
    cumulative_percent: float
    cumulative_grade: str
    roll: Optional[int] = None
    rank: Optional[int] = None
    class_size: Optional[int] = None
    subject_totals: Tuple[SubjectTotal, ...] = ()

    @property
    def rank_label(self) -> Optional[str]:
        return rank_label(self.rank, self.class_size)

    def term(self, name: str) -> Optional[ExamResult]:
        for exam in self.terms:
            if exam.term == name:
                return exam
        return None


def compute_overall(
    student_id: Any,
    exams_by_term: Mapping[str, ExamResult],
    scale: GradeScale = NINE_POINT,
    roll: Optional[int] = None,
) -> OverallResult:
    counted: List[ExamResult] = []
    for term, exam in exams_by_term.items():
        if exam is None:
            continue
        if exam.student_id != student_id:
            raise InvalidArgument(
                f"Result for term {term!r} belongs to {exam.student_id!r}, not {student_id!r}"
            )
        if roll is None:
            roll = exam.roll
        if exam.has_data:
            counted.append(exam)

    obtained = math.fsum(exam.total_obtained for exam in counted)
    full = math.fsum(exam.total_full for exam in counted)
    percent = percent_of(obtained, full)
    if all(exam.all_absent for exam in counted):
        percent = 0.0

    return OverallResult(
        student_id=student_id,
        terms=tuple(counted),
        cumulative_obtained=obtained,
        cumulative_full=full,
        cumulative_percent=percent,
        cumulative_grade=grade_for(percent, scale),
        roll=roll,
        subject_totals=_subject_totals(counted, scale),
    )


def _subject_totals(exams: Sequence[ExamResult], scale: GradeScale) -> Tuple[SubjectTotal, ...]:
    parts: Dict[str, Tuple[List[float], List[float]]] = {}
    for exam in exams:
        for item in exam.subjects:
            obtained, full = parts.setdefault(item.subject, ([], []))
            obtained.append(item.obtained)
            full.append(item.full)

    totals = []
    for subject, (obtained_parts, full_parts) in parts.items():
        obtained = math.fsum(obtained_parts)
        full = math.fsum(full_parts)
        percent = percent_of(obtained, full)
        totals.append(SubjectTotal(subject, obtained, full, percent, grade_for(percent, scale)))
    return tuple(totals)


def rank_class_overall(overalls: Sequence[OverallResult]) -> List[OverallResult]:
    class_size = len(overalls)
    ranked = competition_ranks(
        overalls,
        score=lambda o: o.cumulative_obtained,
        tie=lambda o: tie_key(o.student_id, o.roll),
    )
    return [replace(overall, rank=rank, class_size=class_size) for overall, rank in ranked]
