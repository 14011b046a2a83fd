from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceFilter, AttendanceRecord, CheckInWrite, StatusWrite


class AttendanceRepository(Protocol):
    """Persistence for attendance records.

    ``upsert_checkin`` and ``upsert_status`` must be a single atomic
    conditional write keyed by (person_id, course_id, calendar_day): concurrent
    calls for the same key never produce two records. A transient conflict is
    reported as ``ConcurrencyConflict`` and is safe to retry.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_key(self, *, person_id: int, course_id: int, calendar_day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert_checkin(self, write: CheckInWrite) -> AttendanceRecord:
        raise NotImplementedError

    def upsert_status(self, write: StatusWrite) -> AttendanceRecord:
        raise NotImplementedError

    def set_check_out(self, *, attendance_id: int, check_out_time: datetime) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def apply_correction(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        notes: Optional[str],
        verified_by: int,
    ) -> Optional[AttendanceRecord]:
        """Reviewer override; ``notes=None`` keeps the current notes."""

        raise NotImplementedError

    def list_records(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_person(
        self, person_id: int, limit: int, *, course_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
