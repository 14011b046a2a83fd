from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, VerificationMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geo.distance import Coordinate
from .model import AttendanceFilter, AttendanceRecord, CheckInWrite, StatusWrite
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, person_id, course_id, calendar_day, status, verification_method,
    check_in_time, check_out_time, latitude, longitude, distance_meters, notes, verified_by
"""

# Mirrors merge.checkin_supersedes (``incoming`` is the row alias of the insert,
# MySQL 8.0.19+). check_in_time must be assigned last since
# MySQL evaluates ON DUPLICATE KEY assignments left to right.
_SUPERSEDES = "(check_in_time IS NULL OR incoming.check_in_time >= check_in_time)"


def _to_entity(r: dict) -> AttendanceRecord:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = Coordinate(lat=float(r["latitude"]), lon=float(r["longitude"]))
    distance = r.get("distance_meters")
    verified_by = r.get("verified_by")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        person_id=int(r["person_id"]),
        course_id=int(r["course_id"]),
        calendar_day=r["calendar_day"],
        status=AttendanceStatus(r["status"]),
        verification_method=VerificationMethod(r["verification_method"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        reported_location=location,
        distance_meters=float(distance) if distance is not None else None,
        notes=r.get("notes") or "",
        verified_by=int(verified_by) if verified_by is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_by_key(self, cur, person_id: int, course_id: int, calendar_day: date) -> Optional[AttendanceRecord]:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE person_id=%s AND course_id=%s AND calendar_day=%s
            """,
            (int(person_id), int(course_id), calendar_day),
        )
        r = fetchone(cur)
        return _to_entity(r) if r else None

    def _select_by_id(self, cur, attendance_id: int) -> Optional[AttendanceRecord]:
        cur.execute(
            f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
            (int(attendance_id),),
        )
        r = fetchone(cur)
        return _to_entity(r) if r else None

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_by_id(cur, attendance_id)

    def get_for_key(self, *, person_id: int, course_id: int, calendar_day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_by_key(cur, person_id, course_id, calendar_day)

    def upsert_checkin(self, write: CheckInWrite) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO attendance_records(
                    person_id, course_id, calendar_day, status, verification_method,
                    check_in_time, latitude, longitude, distance_meters, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s) AS incoming
                ON DUPLICATE KEY UPDATE
                    status=IF({_SUPERSEDES}, incoming.status, status),
                    verification_method=IF(
                        verified_by IS NOT NULL,
                        'manual',
                        IF({_SUPERSEDES}, incoming.verification_method, verification_method)
                    ),
                    latitude=IF({_SUPERSEDES}, incoming.latitude, latitude),
                    longitude=IF({_SUPERSEDES}, incoming.longitude, longitude),
                    distance_meters=IF({_SUPERSEDES}, incoming.distance_meters, distance_meters),
                    notes=IF({_SUPERSEDES}, incoming.notes, notes),
                    check_in_time=IF({_SUPERSEDES}, incoming.check_in_time, check_in_time)
                """,
                (
                    write.person_id,
                    write.course_id,
                    write.calendar_day,
                    write.status.value,
                    write.verification_method.value,
                    write.check_in_time,
                    write.reported_location.lat,
                    write.reported_location.lon,
                    write.distance_meters,
                    write.notes,
                ),
            )
            return self._select_by_key(cur, write.person_id, write.course_id, write.calendar_day)

    def upsert_status(self, write: StatusWrite) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    person_id, course_id, calendar_day, status, verification_method, notes, verified_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s) AS incoming
                ON DUPLICATE KEY UPDATE
                    status=incoming.status,
                    verification_method=incoming.verification_method,
                    notes=COALESCE(%s, notes),
                    verified_by=COALESCE(incoming.verified_by, verified_by)
                """,
                (
                    write.person_id,
                    write.course_id,
                    write.calendar_day,
                    write.status.value,
                    VerificationMethod.MANUAL.value,
                    write.notes or "",
                    write.verified_by,
                    write.notes,
                ),
            )
            return self._select_by_key(cur, write.person_id, write.course_id, write.calendar_day)

    def set_check_out(self, *, attendance_id: int, check_out_time: datetime) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET check_out_time=%s WHERE attendance_id=%s",
                (check_out_time, int(attendance_id)),
            )
            return self._select_by_id(cur, attendance_id)

    def apply_correction(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        notes: Optional[str],
        verified_by: int,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, notes=COALESCE(%s, notes), verification_method=%s, verified_by=%s
                WHERE attendance_id=%s
                """,
                (status.value, notes, VerificationMethod.MANUAL.value, int(verified_by), int(attendance_id)),
            )
            return self._select_by_id(cur, attendance_id)

    def list_records(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if criteria.course_id is not None:
            clauses.append("course_id=%s")
            params.append(int(criteria.course_id))
        if criteria.person_id is not None:
            clauses.append("person_id=%s")
            params.append(int(criteria.person_id))
        if criteria.status is not None:
            clauses.append("status=%s")
            params.append(criteria.status.value)
        if criteria.start_date is not None:
            clauses.append("calendar_day >= %s")
            params.append(criteria.start_date)
        if criteria.end_date is not None:
            clauses.append("calendar_day <= %s")
            params.append(criteria.end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY calendar_day ASC, person_id ASC, course_id ASC
                """,
                tuple(params),
            )
            return [_to_entity(r) for r in fetchall(cur)]

    def get_recent_for_person(
        self, person_id: int, limit: int, *, course_id: Optional[int] = None
    ) -> Sequence[AttendanceRecord]:
        clauses = ["person_id=%s"]
        params: list[object] = [int(person_id)]
        if course_id is not None:
            clauses.append("course_id=%s")
            params.append(int(course_id))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY calendar_day DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_entity(r) for r in fetchall(cur)]
