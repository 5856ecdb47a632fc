import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from resultdesk.config.settings import settings
from resultdesk.core.access import (
    PublicationStatus,
    can_disclose,
    publish,
    require_disclosure,
    unpublish,
)
from resultdesk.core.errors import AccessDenied
from resultdesk.core.exam import ExamResult, compute_exam
from resultdesk.core.grade_scale import LETTER, NINE_POINT, GradeScale, get_scale
from resultdesk.core.models import ClassConfig, Student
from resultdesk.core.overall import OverallResult, compute_overall, rank_class_overall
from resultdesk.core.progress import TermProgress, term_progress
from resultdesk.core.ranking import rank_class
from resultdesk.services.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class ResultServiceError(Exception):
    pass


@dataclass(frozen=True)
class Marksheet:
    student: Student
    subjects: Tuple[str, ...]
    exams: Tuple[ExamResult, ...]
    overall: OverallResult


class ResultService:
    def __init__(
        self,
        store: SnapshotStore,
        admin_scale: GradeScale = NINE_POINT,
        marksheet_scale: GradeScale = NINE_POINT,
        public_scale: GradeScale = LETTER,
    ) -> None:
        self.store = store
        self.admin_scale = admin_scale
        self.marksheet_scale = marksheet_scale
        self.public_scale = public_scale

    @classmethod
    def from_settings(cls) -> "ResultService":
        return cls(
            SnapshotStore.from_settings(),
            admin_scale=get_scale(settings.admin_scale),
            marksheet_scale=get_scale(settings.marksheet_scale),
            public_scale=get_scale(settings.public_scale),
        )

    def _config(self, class_name: str) -> ClassConfig:
        config = self.store.config(class_name)
        if config is None:
            raise ResultServiceError(f"Class {class_name!r} is not configured")
        return config

    def _exam_results(self, config: ClassConfig, term: str, scale: GradeScale) -> List[ExamResult]:
        results = []
        for student in self.store.students(config.class_name):
            marks = self.store.marks_for(student.student_id).get(term)
            results.append(compute_exam(student.student_id, term, marks, config, scale, roll=student.roll))
        _log_warnings(results, f"{config.class_name}/{term}")
        return rank_class(results)

    def class_exam_results(self, class_name: str, term: str) -> List[ExamResult]:
        config = self._config(class_name)
        if not config.has_term(term):
            raise ResultServiceError(f"Term {term!r} is not configured for class {class_name!r}")
        return self._exam_results(config, term, self.admin_scale)

    def _overall_results(self, config: ClassConfig, scale: GradeScale) -> Tuple[Dict[str, List[ExamResult]], List[OverallResult]]:
        by_term = {term: self._exam_results(config, term, scale) for term in config.terms}
        overalls = []
        for student in self.store.students(config.class_name):
            recorded = self.store.marks_for(student.student_id)
            exams = {}
            for term, ranked in by_term.items():
                if term not in recorded:
                    continue
                exams[term] = next(r for r in ranked if r.student_id == student.student_id)
            overalls.append(compute_overall(student.student_id, exams, scale, roll=student.roll))
        return by_term, rank_class_overall(overalls)

    def class_overall_results(self, class_name: str) -> List[OverallResult]:
        _, overalls = self._overall_results(self._config(class_name), self.admin_scale)
        return overalls

    def marksheet(self, class_name: str, student_id: str) -> Marksheet:
        config = self._config(class_name)
        student = self.store.student(student_id)
        if student is None or student.class_name != class_name:
            raise ResultServiceError(f"Student {student_id!r} not found in class {class_name!r}")
        by_term, overalls = self._overall_results(config, self.marksheet_scale)
        exams = tuple(
            next(r for r in ranked if r.student_id == student_id) for ranked in by_term.values()
        )
        overall = next(o for o in overalls if o.student_id == student_id)
        return Marksheet(student=student, subjects=config.subjects, exams=exams, overall=overall)

    def public_result(
        self,
        class_name: str,
        roll: int,
        term: str,
        dob: Optional[str] = None,
    ) -> Tuple[Student, ExamResult]:
        status = self.store.publication(term)
        if not can_disclose(term, status):
            raise AccessDenied()
        config = self.store.config(class_name)
        student = self.store.find_by_roll(class_name, roll)
        if config is None or student is None or not config.has_term(term):
            raise AccessDenied()
        if dob is not None and (student.dob or "").strip() != dob.strip():
            raise AccessDenied()
        ranked = self._exam_results(config, term, self.public_scale)
        result = next(r for r in ranked if r.student_id == student.student_id)
        if not result.has_data:
            raise AccessDenied()
        return student, require_disclosure(term, status, result)

    def term_progress(self, term: str) -> TermProgress:
        return term_progress(
            term,
            self.store.students(),
            self.store.configs(),
            self.store.marks_by_student(),
        )

    def publication_statuses(self) -> List[PublicationStatus]:
        return self.store.publications()

    def publication_status(self, term: str) -> PublicationStatus:
        return self.store.publication(term)

    def set_publication(self, term: str, is_published: bool, force: bool = False) -> PublicationStatus:
        known = {status.term for status in self.store.publications()}
        if term not in known:
            raise ResultServiceError(f"Term {term!r} is not configured for any class")
        current = self.store.publication(term)
        if is_published:
            progress = self.term_progress(term)
            if progress.pending and not force:
                raise ResultServiceError(
                    f"{progress.pending} students still have pending marks for {term!r}"
                )
            updated = publish(current)
        else:
            updated = unpublish(current)
        self.store.save_publication(updated)
        logger.info("Results for %r %s", term, "published" if updated.is_published else "unpublished")
        return updated


def _log_warnings(results: Iterable[ExamResult], context: str) -> None:
    warnings = [w for r in results for w in r.warnings]
    if not warnings:
        return
    logger.warning("%d data-quality warnings while computing %s", len(warnings), context)
    for warning in warnings:
        logger.debug("%s: %s (student=%s, subject=%s)", warning.code.value, warning.message, warning.student_id, warning.subject)
