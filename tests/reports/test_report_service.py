from __future__ import annotations

from datetime import date

from class_attendance.attendance.model import AttendanceFilter, AttendanceRecord
from class_attendance.core.enums import AttendanceStatus, GroupBy, VerificationMethod
from class_attendance.reports.service import ReportService


class FakeAttendanceRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_filter = None

    def list_records(self, criteria: AttendanceFilter):
        self.last_filter = criteria
        return [r for r in self._rows if criteria.matches(r)]


def rec(i: int, person_id: int, course_id: int, day: date, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=i,
        person_id=person_id,
        course_id=course_id,
        calendar_day=day,
        status=status,
        verification_method=VerificationMethod.GEOLOCATION,
    )


ROWS = [
    rec(1, 2, 1, date(2024, 9, 2), AttendanceStatus.PRESENT),
    rec(2, 2, 1, date(2024, 9, 9), AttendanceStatus.LATE),
    rec(3, 3, 1, date(2024, 9, 2), AttendanceStatus.ABSENT),
    rec(4, 3, 1, date(2024, 9, 9), AttendanceStatus.PRESENT),
    rec(5, 3, 1, date(2024, 9, 16), AttendanceStatus.EXCUSED),
    rec(6, 2, 2, date(2024, 10, 2), AttendanceStatus.PRESENT),
]


def test_summary_forwards_filter():
    repo = FakeAttendanceRepo(ROWS)
    criteria = AttendanceFilter(course_id=1, start_date=date(2024, 9, 1), end_date=date(2024, 9, 30))

    s = ReportService(repo).summary(criteria)

    assert repo.last_filter == criteria
    assert s.total == 5
    assert s.counts[AttendanceStatus.PRESENT] == 2


def test_trend_monthly():
    buckets = ReportService(FakeAttendanceRepo(ROWS)).trend(AttendanceFilter(), GroupBy.MONTHLY)
    assert [(b.key, b.total) for b in buckets] == [("2024-09", 5), ("2024-10", 1)]


def test_person_breakdown_sorted_by_rate(people):
    stats = ReportService(FakeAttendanceRepo(ROWS), people=people).person_breakdown(AttendanceFilter(course_id=1))

    assert [s.person_id for s in stats] == [2, 3]
    assert stats[0].attendance_rate == 100
    assert stats[0].full_name == "Alice"
    assert stats[1].attendance_rate == 33
    assert stats[1].external_code == "S101"


def test_course_breakdown(courses):
    stats = ReportService(FakeAttendanceRepo(ROWS), courses=courses).course_breakdown(AttendanceFilter())

    assert [(c.code, c.total) for c in stats] == [("CS101", 5), ("CS202", 1)]
    assert stats[0].counts[AttendanceStatus.EXCUSED] == 1


def test_status_filter():
    s = ReportService(FakeAttendanceRepo(ROWS)).summary(AttendanceFilter(status=AttendanceStatus.PRESENT))
    assert s.total == 3
    assert s.percentages[AttendanceStatus.PRESENT] == 100
