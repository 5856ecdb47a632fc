from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, TypeVar

from resultdesk.core.errors import AccessDenied

T = TypeVar("T")


@dataclass(frozen=True)
class PublicationStatus:
    term: str
    is_published: bool = False
    published_at: Optional[datetime] = None


def publish(status: PublicationStatus, at: Optional[datetime] = None) -> PublicationStatus:
    if status.is_published:
        return status
    return PublicationStatus(status.term, True, at or datetime.now(timezone.utc))


def unpublish(status: PublicationStatus) -> PublicationStatus:
    return PublicationStatus(status.term, False, None)


def can_disclose(term: str, status: Optional[PublicationStatus]) -> bool:
    if status is None or status.term != term:
        return False
    return status.is_published is True


def require_disclosure(term: str, status: Optional[PublicationStatus], result: T) -> T:
    if not can_disclose(term, status):
        raise AccessDenied()
    return result
