from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

DEFAULT_FULL_MARKS = 100

TermMarks = Mapping[str, Any]
StudentMarks = Mapping[str, TermMarks]


@dataclass(frozen=True)
class Student:
    student_id: str
    class_name: str
    roll: Optional[int] = None
    name: str = ""
    dob: Optional[str] = None
    father_name: str = ""
    contact: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Student":
        return cls(
            student_id=_first_text(data, "id", "_id", "studentId"),
            class_name=_first_text(data, "class", "className"),
            roll=_to_roll(data.get("roll", data.get("rollNumber"))),
            name=str(data.get("studentName") or data.get("name") or ""),
            dob=data.get("dob") or None,
            father_name=str(data.get("fatherName") or ""),
            contact=str(data.get("contact") or data.get("phone") or ""),
        )


@dataclass(frozen=True)
class ClassConfig:
    class_name: str
    subjects: Tuple[str, ...] = ()
    terms: Tuple[str, ...] = ()
    full_marks: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    default_full_marks: int = DEFAULT_FULL_MARKS

    def full_marks_for(self, term: str, subject: str) -> float:
        value = (self.full_marks.get(term) or {}).get(subject)
        if isinstance(value, bool):
            return float(self.default_full_marks)
        try:
            number = float(value)
        except (TypeError, ValueError):
            return float(self.default_full_marks)
        if number > 0:
            return number
        return float(self.default_full_marks)

    def has_term(self, term: str) -> bool:
        return term in self.terms

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default_full_marks: int = DEFAULT_FULL_MARKS) -> "ClassConfig":
        raw_full = data.get("fullMarks")
        if raw_full is None:
            raw_full = data.get("examsFullMarks")
        full_marks: Dict[str, Dict[str, Any]] = {}
        for term, per_subject in (raw_full or {}).items():
            if isinstance(per_subject, Mapping):
                full_marks[str(term)] = {str(k): v for k, v in per_subject.items()}
        return cls(
            class_name=_first_text(data, "class", "className"),
            subjects=_unique(_subject_key(s) for s in data.get("subjects") or []),
            terms=_unique(str(t) for t in data.get("terms") or data.get("exams") or []),
            full_marks=full_marks,
            default_full_marks=default_full_marks,
        )


def _first_text(data: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return str(value)
    return ""


def _subject_key(subject: Any) -> str:
    if isinstance(subject, Mapping):
        return str(subject.get("id") or subject.get("name") or "")
    return str(subject)


def _unique(values) -> Tuple[str, ...]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


def _to_roll(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
