from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest

from class_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from class_attendance.attendance.service import AttendanceService
from class_attendance.container import build_services
from class_attendance.core.enums import DayOfWeek, RequestStatus
from class_attendance.courses.model import Course
from class_attendance.geo.distance import Coordinate
from class_attendance.geo.geofence import GeofenceVerifier
from class_attendance.people.model import Person
from class_attendance.permissions.model import NewPermissionRequest, PermissionFilter, PermissionRequest
from class_attendance.schedules.model import ScheduleEntry

# 2024-09-02 is a Monday.
MONDAY = date(2024, 9, 2)
CLASS_LOCATION = Coordinate(lat=0.0, lon=0.0)


class InMemorySchedules:
    def __init__(self, entries):
        self._entries = list(entries)

    def schedules_for(self, course_id: int):
        return [e for e in self._entries if e.course_id == course_id]


class InMemoryPeople:
    def __init__(self, people):
        self._by_id = {p.person_id: p for p in people}

    def add(self, person: Person) -> None:
        self._by_id[person.person_id] = person

    def get_by_id(self, person_id: int) -> Optional[Person]:
        return self._by_id.get(int(person_id))

    def get_by_external_code(self, code: str) -> Optional[Person]:
        return next((p for p in self._by_id.values() if p.external_code == code), None)


class InMemoryCourses:
    def __init__(self, courses, enrollments):
        self._by_id = {c.course_id: c for c in courses}
        self._enrollments = set(enrollments)

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self._by_id.get(int(course_id))

    def get_by_code(self, code: str) -> Optional[Course]:
        return next((c for c in self._by_id.values() if c.code == code), None)

    def is_enrolled(self, *, course_id: int, person_id: int) -> bool:
        return (course_id, person_id) in self._enrollments

    def enrolled_person_ids(self, course_id: int):
        return sorted(p for c, p in self._enrollments if c == course_id)

    def courses_for_person(self, person_id: int):
        ids = sorted(c for c, p in self._enrollments if p == person_id)
        return [self._by_id[c] for c in ids]


class InMemoryPermissions:
    def __init__(self):
        self._by_id: dict[int, PermissionRequest] = {}
        self._next_id = 0

    def create(self, new: NewPermissionRequest) -> PermissionRequest:
        self._next_id += 1
        req = PermissionRequest(
            request_id=self._next_id,
            person_id=new.person_id,
            course_id=new.course_id,
            kind=new.kind,
            reason=new.reason,
            start_date=new.start_date,
            end_date=new.end_date,
            status=RequestStatus.PENDING,
            created_at=new.created_at,
        )
        self._by_id[req.request_id] = req
        return req

    def get_by_id(self, request_id: int) -> Optional[PermissionRequest]:
        return self._by_id.get(int(request_id))

    def list_requests(self, criteria: PermissionFilter, *, limit: int):
        rows = [r for r in self._by_id.values() if criteria.matches(r)]
        rows.sort(key=lambda r: (r.created_at, r.request_id), reverse=True)
        return rows[:limit]

    def decide(self, *, request_id, status, decided_by, decided_at, review_notes) -> bool:
        req = self._by_id.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._by_id[req.request_id] = replace(
            req, status=status, decided_by=decided_by, decided_at=decided_at, review_notes=review_notes
        )
        return True

    def delete_pending(self, request_id: int) -> bool:
        req = self._by_id.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        del self._by_id[req.request_id]
        return True


@pytest.fixture
def schedules():
    return InMemorySchedules(
        [
            ScheduleEntry(
                schedule_id=1,
                course_id=1,
                day_of_week=DayOfWeek.MONDAY,
                start_time=time(9, 0),
                end_time=time(10, 0),
                location=CLASS_LOCATION,
            ),
            ScheduleEntry(
                schedule_id=2,
                course_id=2,
                day_of_week=DayOfWeek.WEDNESDAY,
                start_time=time(13, 0),
                end_time=time(14, 30),
                location=Coordinate(lat=10.7769, lon=106.7009),
            ),
        ]
    )


@pytest.fixture
def people():
    return InMemoryPeople(
        [
            Person(person_id=1, full_name="Reviewer"),
            Person(person_id=2, full_name="Alice", external_code="S100"),
            Person(person_id=3, full_name="Bao", external_code="S101"),
            Person(person_id=4, full_name="Not Enrolled", external_code="S102"),
        ]
    )


@pytest.fixture
def courses():
    return InMemoryCourses(
        [
            Course(course_id=1, code="CS101", name="Intro"),
            Course(course_id=2, code="CS202", name="Data Structures"),
        ],
        {(1, 2), (1, 3), (2, 2)},
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendanceRepository()


@pytest.fixture
def service(attendance_repo, schedules, people, courses):
    return AttendanceService(attendance_repo, schedules, people, courses, geofence=GeofenceVerifier(50))


@pytest.fixture
def permissions_repo():
    return InMemoryPermissions()


@pytest.fixture
def container(attendance_repo, schedules, people, courses, permissions_repo):
    return build_services(
        attendance_repo=attendance_repo,
        schedules_repo=schedules,
        people_repo=people,
        courses_repo=courses,
        permissions_repo=permissions_repo,
    )


@pytest.fixture
def monday_at():
    def _at(hour: int, minute: int, second: int = 0) -> datetime:
        return datetime.combine(MONDAY, time(hour, minute, second))

    return _at
