from typing import Any, Dict, List

from resultdesk.core.access import PublicationStatus
from resultdesk.core.errors import DataWarning
from resultdesk.core.exam import ExamResult
from resultdesk.core.marks import SubjectScore, format_number
from resultdesk.core.models import Student
from resultdesk.core.overall import OverallResult
from resultdesk.core.progress import TermProgress
from resultdesk.services.result_service import Marksheet


def _pct(value: float) -> float:
    return round(value, 2)


def subject_to_dict(item: SubjectScore) -> Dict[str, Any]:
    return {
        "subject": item.subject,
        "mark": item.display,
        "obtained": format_number(item.obtained),
        "full": format_number(item.full),
        "percent": _pct(item.percent),
        "grade": item.grade,
        "isAbsent": item.is_absent,
        "isEntered": item.is_entered,
    }


def warning_to_dict(warning: DataWarning) -> Dict[str, Any]:
    return {
        "code": warning.code.value,
        "message": warning.message,
        "studentId": warning.student_id,
        "term": warning.term,
        "subject": warning.subject,
    }


def exam_to_dict(result: ExamResult, include_warnings: bool = True) -> Dict[str, Any]:
    data = {
        "studentId": result.student_id,
        "roll": result.roll,
        "term": result.term,
        "subjects": [subject_to_dict(item) for item in result.subjects],
        "totalObtained": format_number(result.total_obtained),
        "totalFull": format_number(result.total_full),
        "percent": _pct(result.percent),
        "grade": result.grade,
        "rank": result.rank,
        "classSize": result.class_size,
        "rankLabel": result.rank_label,
    }
    if include_warnings:
        data["warnings"] = [warning_to_dict(w) for w in result.warnings]
    return data


def overall_to_dict(overall: OverallResult) -> Dict[str, Any]:
    return {
        "studentId": overall.student_id,
        "roll": overall.roll,
        "terms": [exam.term for exam in overall.terms],
        "cumulativeObtained": format_number(overall.cumulative_obtained),
        "cumulativeFull": format_number(overall.cumulative_full),
        "cumulativePercent": _pct(overall.cumulative_percent),
        "cumulativeGrade": overall.cumulative_grade,
        "rank": overall.rank,
        "classSize": overall.class_size,
        "rankLabel": overall.rank_label,
        "subjectTotals": [
            {
                "subject": total.subject,
                "obtained": format_number(total.obtained),
                "full": format_number(total.full),
                "percent": _pct(total.percent),
                "grade": total.grade,
            }
            for total in overall.subject_totals
        ],
    }


def student_to_dict(student: Student) -> Dict[str, Any]:
    return {
        "id": student.student_id,
        "class": student.class_name,
        "roll": student.roll,
        "studentName": student.name,
        "fatherName": student.father_name,
        "dob": student.dob,
    }


def marksheet_to_dict(sheet: Marksheet) -> Dict[str, Any]:
    return {
        "student": student_to_dict(sheet.student),
        "subjects": list(sheet.subjects),
        "exams": [exam_to_dict(exam, include_warnings=False) for exam in sheet.exams],
        "overall": overall_to_dict(sheet.overall),
    }


def public_result_to_dict(student: Student, result: ExamResult) -> Dict[str, Any]:
    return {
        "studentName": student.name,
        "class": student.class_name,
        "roll": student.roll,
        "term": result.term,
        "subjects": [subject_to_dict(item) for item in result.subjects],
        "totalObtained": format_number(result.total_obtained),
        "totalFull": format_number(result.total_full),
        "percent": _pct(result.percent),
        "grade": result.grade,
        "rank": result.rank_label,
    }


def status_to_dict(status: PublicationStatus) -> Dict[str, Any]:
    return {
        "term": status.term,
        "isPublished": status.is_published,
        "publishedAt": status.published_at.isoformat() if status.published_at else None,
    }


def progress_to_dict(progress: TermProgress) -> Dict[str, Any]:
    return {
        "term": progress.term,
        "totalStudents": progress.total_students,
        "updated": progress.updated,
        "pendingUpdates": progress.pending,
        "completionPercentage": progress.completion_percentage,
        "perClass": {
            name: {"updated": c.updated, "pending": c.pending, "total": c.total}
            for name, c in progress.per_class.items()
        },
    }


def statuses_to_list(statuses: List[PublicationStatus]) -> List[Dict[str, Any]]:
    return [status_to_dict(s) for s in statuses]
