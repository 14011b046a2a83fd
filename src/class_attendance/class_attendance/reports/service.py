from __future__ import annotations

from collections import defaultdict
from typing import Optional

from ..attendance.model import AttendanceFilter, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import AttendanceStatus, GroupBy
from ..courses.repository import CourseRepository
from ..people.repository import PersonRepository
from .aggregation import Summary, TrendBucket, aggregate, count_by_status, percentage, summarize
from .model import CourseStats, PersonStats


class ReportService:
    """Read-only reporting over attendance records."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        people: Optional[PersonRepository] = None,
        courses: Optional[CourseRepository] = None,
    ):
        self._attendance = attendance
        self._people = people
        self._courses = courses

    def _records(self, criteria: AttendanceFilter) -> list[AttendanceRecord]:
        return list(self._attendance.list_records(criteria))

    def summary(self, criteria: AttendanceFilter) -> Summary:
        return summarize(self._records(criteria))

    def trend(self, criteria: AttendanceFilter, group_by: GroupBy) -> list[TrendBucket]:
        return aggregate(self._records(criteria), GroupBy(group_by))

    def person_breakdown(self, criteria: AttendanceFilter) -> list[PersonStats]:
        """Per-person counts and attendance rate (present + late), best first."""

        by_person: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for r in self._records(criteria):
            by_person[r.person_id].append(r)

        out: list[PersonStats] = []
        for person_id, records in by_person.items():
            counts = count_by_status(records)
            attended = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE]
            person = self._people.get_by_id(person_id) if self._people else None
            out.append(
                PersonStats(
                    person_id=person_id,
                    full_name=person.full_name if person else "",
                    external_code=person.external_code if person else None,
                    total=len(records),
                    counts=counts,
                    attendance_rate=percentage(attended, len(records)),
                )
            )

        out.sort(key=lambda s: (-s.attendance_rate, s.person_id))
        return out

    def course_breakdown(self, criteria: AttendanceFilter) -> list[CourseStats]:
        by_course: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for r in self._records(criteria):
            by_course[r.course_id].append(r)

        out: list[CourseStats] = []
        for course_id in sorted(by_course):
            records = by_course[course_id]
            course = self._courses.get_by_id(course_id) if self._courses else None
            out.append(
                CourseStats(
                    course_id=course_id,
                    code=course.code if course else "Unknown",
                    total=len(records),
                    counts=count_by_status(records),
                )
            )
        return out
