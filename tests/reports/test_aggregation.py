from __future__ import annotations

from datetime import date

import pytest

from class_attendance.attendance.model import AttendanceRecord
from class_attendance.core.enums import AttendanceStatus, GroupBy, VerificationMethod
from class_attendance.reports.aggregation import aggregate, bucket_key, percentage, summarize

P, L, A, E = AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT, AttendanceStatus.EXCUSED


def rec(i: int, day: date, status: AttendanceStatus) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=i,
        person_id=i,
        course_id=1,
        calendar_day=day,
        status=status,
        verification_method=VerificationMethod.MANUAL,
    )


def test_empty_summary_has_every_status_at_zero():
    s = summarize([])

    assert s.total == 0
    assert s.counts == {P: 0, L: 0, A: 0, E: 0}
    assert s.percentages == {P: 0, L: 0, A: 0, E: 0}


def test_summary_percentages_sum_to_100():
    day = date(2024, 9, 2)
    records = [rec(1, day, P), rec(2, day, P), rec(3, day, L), rec(4, day, A)]

    s = summarize(records)

    assert s.counts == {P: 2, L: 1, A: 1, E: 0}
    assert s.percentages == {P: 50, L: 25, A: 25, E: 0}
    assert sum(s.percentages.values()) == 100


def test_percentage_rounds_half_up():
    assert percentage(1, 8) == 13  # 12.5
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(5, 0) == 0


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2023, 1, 1), "2022-12-26"),  # Sunday
        (date(2023, 1, 2), "2023-01-02"),  # Monday
        (date(2023, 1, 4), "2023-01-02"),  # Wednesday
        (date(2023, 1, 8), "2023-01-02"),  # Sunday
    ],
)
def test_weekly_key_is_monday(day, expected):
    assert bucket_key(day, GroupBy.WEEKLY) == expected


def test_daily_and_monthly_keys():
    assert bucket_key(date(2024, 3, 5), GroupBy.DAILY) == "2024-03-05"
    assert bucket_key(date(2024, 3, 5), GroupBy.MONTHLY) == "2024-03"


def test_buckets_sorted_with_independent_percentages():
    records = [
        rec(1, date(2023, 1, 4), P),
        rec(2, date(2023, 1, 1), L),
        rec(3, date(2023, 1, 1), P),
        rec(4, date(2023, 1, 3), A),
        rec(5, date(2023, 1, 2), P),
    ]

    buckets = aggregate(records, GroupBy.WEEKLY)

    assert [b.key for b in buckets] == ["2022-12-26", "2023-01-02"]
    assert buckets[0].total == 2
    assert buckets[0].percentages == {P: 50, L: 50, A: 0, E: 0}
    assert buckets[1].total == 3
    assert buckets[1].percentages == {P: 67, L: 0, A: 33, E: 0}


def test_each_record_lands_in_exactly_one_bucket():
    records = [rec(i, date(2024, 1 + i % 3, 1 + i % 27), P) for i in range(40)]

    for group_by in GroupBy:
        assert sum(b.total for b in aggregate(records, group_by)) == len(records)


def test_monthly_buckets_cross_year_in_order():
    buckets = aggregate([rec(1, date(2024, 1, 3), P), rec(2, date(2023, 12, 30), E)], GroupBy.MONTHLY)
    assert [b.key for b in buckets] == ["2023-12", "2024-01"]
