from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping

from resultdesk.core.marks import MarkKind, RawMark
from resultdesk.core.models import ClassConfig, Student, StudentMarks


@dataclass
class ClassProgress:
    total: int = 0
    updated: int = 0

    @property
    def pending(self) -> int:
        return self.total - self.updated


@dataclass
class TermProgress:
    term: str
    total_students: int = 0
    updated: int = 0
    per_class: Dict[str, ClassProgress] = field(default_factory=dict)

    @property
    def pending(self) -> int:
        return self.total_students - self.updated

    @property
    def completion_percentage(self) -> float:
        if self.total_students == 0:
            return 0.0
        return round(self.updated * 100.0 / self.total_students, 2)


def is_complete(term: str, config: ClassConfig, marks: StudentMarks) -> bool:
    if not config.has_term(term) or not config.subjects:
        return False
    term_marks = marks.get(term)
    if not isinstance(term_marks, Mapping):
        return False
    return all(
        RawMark.parse(term_marks.get(subject)).kind is not MarkKind.MISSING
        for subject in config.subjects
    )


def term_progress(
    term: str,
    students: Iterable[Student],
    configs: Mapping[str, ClassConfig],
    marks_by_student: Mapping[str, StudentMarks],
) -> TermProgress:
    progress = TermProgress(term=term)
    for student in students:
        per_class = progress.per_class.setdefault(student.class_name, ClassProgress())
        per_class.total += 1
        progress.total_students += 1
        config = configs.get(student.class_name)
        if config and is_complete(term, config, marks_by_student.get(student.student_id) or {}):
            per_class.updated += 1
            progress.updated += 1
    return progress
