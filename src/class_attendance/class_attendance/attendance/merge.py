"""Merge policy for the per-day attendance record.

A check-in on a day that already has a record is a resubmission (GPS drift,
client retries): the newest check-in wins for status, check-in time,
location, verification method, distance and notes. Check-out time and the
reviewer reference are never touched by a check-in, and once a reviewer has
signed the record its verification method stays manual. A check-in older
than the one already stored does not overwrite it, so the stored state is
always that of the chronologically last check-in regardless of write order.

Repositories apply these functions inside their atomic write; the MySQL
repository mirrors them in its ``ON DUPLICATE KEY UPDATE`` clause.
"""

from __future__ import annotations

from dataclasses import replace

from ..core.enums import VerificationMethod
from .model import AttendanceRecord, CheckInWrite, StatusWrite


def checkin_supersedes(existing: AttendanceRecord, incoming: CheckInWrite) -> bool:
    return existing.check_in_time is None or incoming.check_in_time >= existing.check_in_time


def new_record_from_checkin(attendance_id: int, incoming: CheckInWrite) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=attendance_id,
        person_id=incoming.person_id,
        course_id=incoming.course_id,
        calendar_day=incoming.calendar_day,
        status=incoming.status,
        verification_method=incoming.verification_method,
        check_in_time=incoming.check_in_time,
        reported_location=incoming.reported_location,
        distance_meters=incoming.distance_meters,
        notes=incoming.notes,
    )


def merge_checkin(existing: AttendanceRecord, incoming: CheckInWrite) -> AttendanceRecord:
    if not checkin_supersedes(existing, incoming):
        return existing

    method = incoming.verification_method
    if existing.verified_by is not None:
        method = VerificationMethod.MANUAL

    return replace(
        existing,
        status=incoming.status,
        check_in_time=incoming.check_in_time,
        reported_location=incoming.reported_location,
        verification_method=method,
        distance_meters=incoming.distance_meters,
        notes=incoming.notes,
    )


def new_record_from_status(attendance_id: int, incoming: StatusWrite) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=attendance_id,
        person_id=incoming.person_id,
        course_id=incoming.course_id,
        calendar_day=incoming.calendar_day,
        status=incoming.status,
        verification_method=VerificationMethod.MANUAL,
        notes=incoming.notes or "",
        verified_by=incoming.verified_by,
    )


def merge_status(existing: AttendanceRecord, incoming: StatusWrite) -> AttendanceRecord:
    return replace(
        existing,
        status=incoming.status,
        verification_method=VerificationMethod.MANUAL,
        notes=existing.notes if incoming.notes is None else incoming.notes,
        verified_by=existing.verified_by if incoming.verified_by is None else incoming.verified_by,
    )
