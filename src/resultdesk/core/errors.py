from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


PUBLIC_DENIAL_MESSAGE = "Results not available"


class ResultDeskError(Exception):
    pass


class InvalidArgument(ResultDeskError, ValueError):
    pass


class AccessDenied(ResultDeskError):
    def __init__(self, message: str = PUBLIC_DENIAL_MESSAGE) -> None:
        super().__init__(message)


class WarningCode(str, Enum):
    MARK_OUT_OF_RANGE = "MARK_OUT_OF_RANGE"
    INVALID_MARK = "INVALID_MARK"
    UNKNOWN_SUBJECT = "UNKNOWN_SUBJECT"
    UNKNOWN_TERM = "UNKNOWN_TERM"
    MALFORMED_MARKS = "MALFORMED_MARKS"


@dataclass(frozen=True)
class DataWarning:
    code: WarningCode
    message: str
    student_id: Optional[Any] = None
    term: Optional[str] = None
    subject: Optional[str] = None

    def for_student(self, student_id: Any, term: str) -> "DataWarning":
        return DataWarning(self.code, self.message, student_id, term, self.subject)
