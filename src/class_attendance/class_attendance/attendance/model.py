from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, VerificationMethod
from ..geo.distance import Coordinate


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one person's attendance for one course on one calendar day."""

    attendance_id: int
    person_id: int
    course_id: int
    calendar_day: date
    status: AttendanceStatus
    verification_method: VerificationMethod
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    reported_location: Optional[Coordinate] = None
    distance_meters: Optional[float] = None
    notes: str = ""
    verified_by: Optional[int] = None

    @property
    def key(self) -> tuple[int, int, date]:
        return (self.person_id, self.course_id, self.calendar_day)


@dataclass(frozen=True)
class CheckInWrite:
    """Values derived from one accepted check-in, ready to be reconciled."""

    person_id: int
    course_id: int
    calendar_day: date
    status: AttendanceStatus
    check_in_time: datetime
    reported_location: Coordinate
    verification_method: VerificationMethod
    distance_meters: float
    notes: str = ""

    @property
    def key(self) -> tuple[int, int, date]:
        return (self.person_id, self.course_id, self.calendar_day)


@dataclass(frozen=True)
class StatusWrite:
    """Administrative back-fill of a day's status (no location, no clock)."""

    person_id: int
    course_id: int
    calendar_day: date
    status: AttendanceStatus
    notes: Optional[str] = None
    verified_by: Optional[int] = None

    @property
    def key(self) -> tuple[int, int, date]:
        return (self.person_id, self.course_id, self.calendar_day)


@dataclass(frozen=True)
class AttendanceFilter:
    """Report filter. Every field is optional; dates are inclusive."""

    course_id: Optional[int] = None
    person_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def matches(self, record: AttendanceRecord) -> bool:
        if self.course_id is not None and record.course_id != self.course_id:
            return False
        if self.person_id is not None and record.person_id != self.person_id:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.start_date is not None and record.calendar_day < self.start_date:
            return False
        if self.end_date is not None and record.calendar_day > self.end_date:
            return False
        return True


@dataclass(frozen=True)
class CheckInOutcome:
    record: AttendanceRecord
    within_radius: bool
    distance_meters: float


@dataclass(frozen=True)
class RosterRow:
    person_id: int
    full_name: str
    external_code: Optional[str]
    status: AttendanceStatus
    notes: str
    attendance_id: Optional[int]
