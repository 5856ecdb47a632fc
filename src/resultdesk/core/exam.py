import math
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Tuple

from resultdesk.core.errors import DataWarning, InvalidArgument, WarningCode
from resultdesk.core.grade_scale import NINE_POINT, GradeScale, grade_for
from resultdesk.core.marks import SubjectScore, percent_of, score
from resultdesk.core.models import ClassConfig


@dataclass(frozen=True)
class ExamResult:
    student_id: Any
    term: str
    subjects: Tuple[SubjectScore, ...]
    total_obtained: float
    total_full: float
    percent: float
    grade: str
    roll: Optional[int] = None
    rank: Optional[int] = None
    class_size: Optional[int] = None
    warnings: Tuple[DataWarning, ...] = ()

    def subject(self, name: str) -> Optional[SubjectScore]:
        for item in self.subjects:
            if item.subject == name:
                return item
        return None

    @property
    def has_data(self) -> bool:
        return any(item.is_entered for item in self.subjects)

    @property
    def all_absent(self) -> bool:
        return all(item.is_absent for item in self.subjects)

    @property
    def rank_label(self) -> Optional[str]:
        if self.rank is None or self.class_size is None:
            return None
        return f"{self.rank}/{self.class_size}"

    def with_rank(self, rank: int, class_size: int) -> "ExamResult":
        return replace(self, rank=rank, class_size=class_size)


def compute_exam(
    student_id: Any,
    term: str,
    marks: Optional[Mapping[str, Any]],
    config: ClassConfig,
    scale: GradeScale = NINE_POINT,
    roll: Optional[int] = None,
) -> ExamResult:
    if student_id is None:
        raise InvalidArgument("student_id is required")
    if not isinstance(term, str):
        raise InvalidArgument(f"term must be a string, got {type(term).__name__}")
    warnings: List[DataWarning] = []
    if marks is not None and not isinstance(marks, Mapping):
        warnings.append(
            DataWarning(
                WarningCode.MALFORMED_MARKS,
                f"Marks stored as {type(marks).__name__}, not subject to mark pairs; treated as not entered",
                student_id=student_id,
                term=term,
            )
        )
        marks = None
    marks = marks or {}

    if not config.has_term(term):
        warnings.append(
            DataWarning(
                WarningCode.UNKNOWN_TERM,
                f"Term {term!r} is not configured for class {config.class_name!r}",
                student_id=student_id,
                term=term,
            )
        )
        return ExamResult(
            student_id=student_id,
            term=term,
            subjects=(),
            total_obtained=0.0,
            total_full=0.0,
            percent=0.0,
            grade=grade_for(0.0, scale),
            roll=roll,
            warnings=tuple(warnings),
        )

    subjects: List[SubjectScore] = []
    for subject in config.subjects:
        item = score(marks.get(subject), config.full_marks_for(term, subject), scale, subject)
        subjects.append(item)
        warnings.extend(w.for_student(student_id, term) for w in item.warnings)

    for subject in marks:
        if subject not in config.subjects:
            warnings.append(
                DataWarning(
                    WarningCode.UNKNOWN_SUBJECT,
                    f"Mark for unconfigured subject {subject!r} ignored",
                    student_id=student_id,
                    term=term,
                    subject=str(subject),
                )
            )

    total_obtained = math.fsum(item.obtained for item in subjects)
    total_full = math.fsum(item.full for item in subjects)
    percent = percent_of(total_obtained, total_full)
    if all(item.is_absent for item in subjects):
        percent = 0.0

    return ExamResult(
        student_id=student_id,
        term=term,
        subjects=tuple(subjects),
        total_obtained=total_obtained,
        total_full=total_full,
        percent=percent,
        grade=grade_for(percent, scale),
        roll=roll,
        warnings=tuple(warnings),
    )
