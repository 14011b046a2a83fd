from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, TypeVar

from ..common.datetime_utils import calendar_day, now_local
from ..common.validators import require_coordinate
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_UPSERT_MAX_RETRIES
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    ConcurrencyConflict,
    IneligibleWindow,
    NoCheckInFound,
    NotEnrolled,
    RecordNotFound,
    StorageUnavailable,
    UnknownCourse,
    UnknownPerson,
)
from ..courses.repository import CourseRepository
from ..geo.distance import Coordinate
from ..geo.geofence import GeofenceVerifier
from ..people.repository import PersonRepository
from ..schedules.eligibility import ScheduleEligibilityResolver
from ..schedules.repository import ScheduleRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceFilter, AttendanceRecord, CheckInOutcome, CheckInWrite, RosterRow, StatusWrite
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AttendanceService:
    """The only component allowed to create or mutate attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        people: PersonRepository,
        courses: CourseRepository,
        *,
        eligibility: ScheduleEligibilityResolver | None = None,
        geofence: GeofenceVerifier | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        max_retries: int = DEFAULT_UPSERT_MAX_RETRIES,
    ):
        self._attendance = attendance
        self._schedules = schedules
        self._people = people
        self._courses = courses
        self._eligibility = eligibility or ScheduleEligibilityResolver()
        self._geofence = geofence or GeofenceVerifier()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._max_retries = max(0, int(max_retries))

    def _with_retry(self, op: Callable[[], T], *, what: str) -> T:
        attempt = 0
        while True:
            try:
                return op()
            except ConcurrencyConflict as exc:
                attempt += 1
                if attempt > self._max_retries:
                    logger.error("Giving up on %s after %d conflicts: %s", what, attempt, exc)
                    raise StorageUnavailable(f"Could not write {what}, please retry") from exc
                logger.warning("Write conflict on %s (attempt %d), retrying", what, attempt)

    def _require_enrollment(self, person_id: int, course_id: int) -> None:
        if not self._people.get_by_id(person_id):
            raise UnknownPerson(f"Person {person_id} does not exist")
        if not self._courses.get_by_id(course_id):
            raise UnknownCourse(f"Course {course_id} does not exist")
        if not self._courses.is_enrolled(course_id=course_id, person_id=person_id):
            raise NotEnrolled(f"Person {person_id} is not enrolled in course {course_id}")

    def check_in(
        self,
        person_id: int,
        course_id: int,
        *,
        location: Coordinate,
        now: datetime | None = None,
    ) -> CheckInOutcome:
        now = now or now_local()
        location = require_coordinate(location.lat, location.lon)
        self._require_enrollment(person_id, course_id)

        decision = self._eligibility.resolve(self._schedules.schedules_for(course_id), now)
        if not decision.allowed:
            raise IneligibleWindow(decision.reason or "Check-in is not allowed now")

        geofence = self._geofence.verify(location, decision.entry.location)
        strategy = self._factory.for_checkin(lateness=decision.lateness)
        status = strategy.decide_checkin(geofence=geofence)

        if not geofence.within_radius:
            logger.info(
                "Person %s checked in to course %s %.0fm from class, flagged for review",
                person_id,
                course_id,
                geofence.distance_meters,
            )

        write = CheckInWrite(
            person_id=person_id,
            course_id=course_id,
            calendar_day=calendar_day(now),
            status=status.status,
            check_in_time=now,
            reported_location=location,
            verification_method=status.verification_method,
            distance_meters=geofence.distance_meters,
            notes=status.note,
        )
        record = self._with_retry(lambda: self._attendance.upsert_checkin(write), what="check-in")
        return CheckInOutcome(
            record=record,
            within_radius=geofence.within_radius,
            distance_meters=geofence.distance_meters,
        )

    def check_out(self, person_id: int, course_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = now or now_local()

        record = self._attendance.get_for_key(person_id=person_id, course_id=course_id, calendar_day=calendar_day(now))
        if not record:
            raise NoCheckInFound("No check-in record found for today")

        updated = self._attendance.set_check_out(attendance_id=record.attendance_id, check_out_time=now)
        if not updated:
            raise NoCheckInFound("No check-in record found for today")
        return updated

    def manual_correction(
        self,
        attendance_id: int,
        *,
        reviewer_id: int,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        updated = self._attendance.apply_correction(
            attendance_id=attendance_id,
            status=AttendanceStatus(status),
            notes=notes,
            verified_by=reviewer_id,
        )
        if not updated:
            raise RecordNotFound(f"Attendance record {attendance_id} not found")
        logger.info("Record %s corrected to %s by reviewer %s", attendance_id, updated.status.value, reviewer_id)
        return updated

    def back_fill(
        self,
        *,
        person_id: int,
        course_id: int,
        day: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
        verified_by: Optional[int] = None,
    ) -> AttendanceRecord:
        """Day-scoped upsert with an explicit status (administrative import, approved leave)."""

        write = StatusWrite(
            person_id=person_id,
            course_id=course_id,
            calendar_day=day,
            status=status,
            notes=notes,
            verified_by=verified_by,
        )
        return self._with_retry(lambda: self._attendance.upsert_status(write), what="back-fill")

    def record_for_day(self, person_id: int, course_id: int, day: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_key(person_id=person_id, course_id=course_id, calendar_day=day)

    def history(self, person_id: int, *, course_id: int | None = None, limit: int = DEFAULT_HISTORY_LIMIT):
        return self._attendance.get_recent_for_person(person_id, limit, course_id=course_id)

    def course_roster(self, course_id: int, day: date) -> list[RosterRow]:
        """Every enrolled person with their status for ``day`` (absent when no record)."""

        if not self._courses.get_by_id(course_id):
            raise UnknownCourse(f"Course {course_id} does not exist")

        records = self._attendance.list_records(AttendanceFilter(course_id=course_id, start_date=day, end_date=day))
        by_person = {r.person_id: r for r in records}

        rows: list[RosterRow] = []
        for person_id in self._courses.enrolled_person_ids(course_id):
            person = self._people.get_by_id(person_id)
            rec = by_person.get(person_id)
            rows.append(
                RosterRow(
                    person_id=person_id,
                    full_name=person.full_name if person else "",
                    external_code=person.external_code if person else None,
                    status=rec.status if rec else AttendanceStatus.ABSENT,
                    notes=rec.notes if rec else "",
                    attendance_id=rec.attendance_id if rec else None,
                )
            )
        return rows
