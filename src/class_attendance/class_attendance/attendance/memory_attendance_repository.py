from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, VerificationMethod
from .merge import merge_checkin, merge_status, new_record_from_checkin, new_record_from_status
from .model import AttendanceFilter, AttendanceRecord, CheckInWrite, StatusWrite
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local store guarded by one lock.

    Used by tests and for running the engine without a database.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id_by_key: dict[tuple[int, int, date], int] = {}
        self._next_id = 0

    def _allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _store(self, record: AttendanceRecord) -> AttendanceRecord:
        self._by_id[record.attendance_id] = record
        self._id_by_key[record.key] = record.attendance_id
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_id.get(int(attendance_id))

    def get_for_key(self, *, person_id: int, course_id: int, calendar_day: date) -> Optional[AttendanceRecord]:
        with self._lock:
            rid = self._id_by_key.get((person_id, course_id, calendar_day))
            return self._by_id.get(rid) if rid is not None else None

    def upsert_checkin(self, write: CheckInWrite) -> AttendanceRecord:
        with self._lock:
            rid = self._id_by_key.get(write.key)
            if rid is None:
                return self._store(new_record_from_checkin(self._allocate_id(), write))
            return self._store(merge_checkin(self._by_id[rid], write))

    def upsert_status(self, write: StatusWrite) -> AttendanceRecord:
        with self._lock:
            rid = self._id_by_key.get(write.key)
            if rid is None:
                return self._store(new_record_from_status(self._allocate_id(), write))
            return self._store(merge_status(self._by_id[rid], write))

    def set_check_out(self, *, attendance_id: int, check_out_time: datetime) -> Optional[AttendanceRecord]:
        with self._lock:
            existing = self._by_id.get(int(attendance_id))
            if not existing:
                return None
            return self._store(replace(existing, check_out_time=check_out_time))

    def apply_correction(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        notes: Optional[str],
        verified_by: int,
    ) -> Optional[AttendanceRecord]:
        with self._lock:
            existing = self._by_id.get(int(attendance_id))
            if not existing:
                return None
            return self._store(
                replace(
                    existing,
                    status=status,
                    notes=existing.notes if notes is None else notes,
                    verification_method=VerificationMethod.MANUAL,
                    verified_by=int(verified_by),
                )
            )

    def list_records(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._by_id.values() if criteria.matches(r)]
        items.sort(key=lambda r: (r.calendar_day, r.person_id, r.course_id))
        return items

    def get_recent_for_person(
        self, person_id: int, limit: int, *, course_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        criteria = AttendanceFilter(person_id=person_id, course_id=course_id)
        items = list(self.list_records(criteria))
        items.sort(key=lambda r: r.calendar_day, reverse=True)
        return items[: int(limit)]

    def count(self) -> int:
        with self._lock:
            return len(self._by_id)
