import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from resultdesk.config.settings import settings
from resultdesk.core.access import PublicationStatus
from resultdesk.core.models import DEFAULT_FULL_MARKS, ClassConfig, Student, StudentMarks

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    pass


class SnapshotStore:
    """In-memory view of the roster, class configs, marks and publication flags.

    The document is the export produced by the dashboard's CRUD layer. Marks and
    configs are read-only here; only publication flags change, and those changes
    live for the lifetime of the store.
    """

    def __init__(self, document: Mapping[str, Any], default_full_marks: int = DEFAULT_FULL_MARKS) -> None:
        if not isinstance(document, Mapping):
            raise SnapshotError("Snapshot must be a JSON object")
        self._lock = threading.Lock()
        self._students: List[Student] = []
        self._marks: Dict[str, StudentMarks] = {}
        self._configs: Dict[str, ClassConfig] = {}
        self._publications: Dict[str, PublicationStatus] = {}

        for raw in _list_field(document, "configs"):
            config = ClassConfig.from_dict(raw, default_full_marks=default_full_marks)
            if not config.class_name:
                raise SnapshotError("Class config without a class name")
            self._configs[config.class_name] = config
            for term in config.terms:
                self._publications.setdefault(term, PublicationStatus(term))

        for raw in _list_field(document, "students"):
            student = Student.from_dict(raw)
            if not student.student_id:
                raise SnapshotError("Student record without an id")
            self._students.append(student)
            marks = raw.get("marks")
            if marks is None:
                marks = raw.get("exams")
            self._marks[student.student_id] = marks if isinstance(marks, Mapping) else {}

        for raw in _list_field(document, "publications"):
            term = str(raw.get("term") or "")
            if not term:
                raise SnapshotError("Publication entry without a term")
            self._publications[term] = PublicationStatus(
                term=term,
                is_published=raw.get("isPublished") is True,
                published_at=_parse_timestamp(raw.get("publishedAt")),
            )

        logger.info(
            "Loaded snapshot: %d students, %d classes, %d terms",
            len(self._students),
            len(self._configs),
            len(self._publications),
        )

    @classmethod
    def from_file(cls, path: str, default_full_marks: int = DEFAULT_FULL_MARKS) -> "SnapshotStore":
        snapshot = Path(path)
        if not snapshot.exists():
            raise SnapshotError(f"Snapshot file not found: {snapshot}")
        try:
            document = json.loads(snapshot.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Snapshot file is not valid JSON: {snapshot}") from exc
        return cls(document, default_full_marks=default_full_marks)

    @classmethod
    def from_settings(cls) -> "SnapshotStore":
        return cls.from_file(settings.snapshot_path, settings.default_full_marks)

    def students(self, class_name: Optional[str] = None) -> List[Student]:
        if class_name is None:
            return list(self._students)
        return [s for s in self._students if s.class_name == class_name]

    def student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students if s.student_id == student_id), None)

    def find_by_roll(self, class_name: str, roll: int) -> Optional[Student]:
        return next(
            (s for s in self._students if s.class_name == class_name and s.roll == roll),
            None,
        )

    def config(self, class_name: str) -> Optional[ClassConfig]:
        return self._configs.get(class_name)

    def configs(self) -> Dict[str, ClassConfig]:
        return dict(self._configs)

    def marks_for(self, student_id: str) -> StudentMarks:
        return self._marks.get(student_id, {})

    def marks_by_student(self) -> Dict[str, StudentMarks]:
        return dict(self._marks)

    def publication(self, term: str) -> PublicationStatus:
        with self._lock:
            return self._publications.get(term) or PublicationStatus(term)

    def publications(self) -> List[PublicationStatus]:
        with self._lock:
            return list(self._publications.values())

    def save_publication(self, status: PublicationStatus) -> None:
        with self._lock:
            self._publications[status.term] = status


def _list_field(document: Mapping[str, Any], name: str) -> List[Mapping[str, Any]]:
    items = document.get(name) or []
    if not isinstance(items, list) or not all(isinstance(i, Mapping) for i in items):
        raise SnapshotError(f"Snapshot field '{name}' must be a list of objects")
    return items


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise SnapshotError(f"Invalid publishedAt timestamp: {value}") from exc
