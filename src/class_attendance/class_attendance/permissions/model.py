from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import RequestStatus


@dataclass(frozen=True)
class PermissionRequest:
    """A person's request to be excused from a course for a date range."""

    request_id: int
    person_id: int
    course_id: int
    kind: str
    reason: str
    start_date: date
    end_date: date
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    review_notes: Optional[str] = None


@dataclass(frozen=True)
class NewPermissionRequest:
    person_id: int
    course_id: int
    kind: str
    reason: str
    start_date: date
    end_date: date
    created_at: datetime


@dataclass(frozen=True)
class PermissionFilter:
    status: Optional[RequestStatus] = None
    person_id: Optional[int] = None
    course_id: Optional[int] = None

    def matches(self, req: PermissionRequest) -> bool:
        if self.status is not None and req.status != self.status:
            return False
        if self.person_id is not None and req.person_id != self.person_id:
            return False
        if self.course_id is not None and req.course_id != self.course_id:
            return False
        return True


@dataclass(frozen=True)
class ApprovalOutcome:
    request: PermissionRequest
    excused_records: list[AttendanceRecord] = field(default_factory=list)
