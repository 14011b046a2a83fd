from datetime import datetime, time

import pytest

from class_attendance.core.enums import DayOfWeek, Lateness
from class_attendance.geo.distance import Coordinate
from class_attendance.schedules.eligibility import ScheduleEligibilityResolver
from class_attendance.schedules.model import ScheduleEntry

MONDAY_CLASS = ScheduleEntry(
    schedule_id=1,
    course_id=1,
    day_of_week=DayOfWeek.MONDAY,
    start_time=time(9, 0),
    end_time=time(10, 0),
    location=Coordinate(0.0, 0.0),
)


def monday(hour: int, minute: int) -> datetime:
    return datetime(2024, 9, 2, hour, minute)


@pytest.mark.parametrize(
    "now, allowed, lateness",
    [
        (monday(8, 44), False, None),
        (monday(8, 45), True, Lateness.ON_TIME),
        (monday(9, 0), True, Lateness.ON_TIME),
        (monday(9, 10), True, Lateness.ON_TIME),
        (monday(9, 11), True, Lateness.LATE),
        (monday(10, 0), True, Lateness.LATE),
        (monday(10, 1), False, None),
    ],
)
def test_window_boundaries(now, allowed, lateness):
    decision = ScheduleEligibilityResolver().resolve([MONDAY_CLASS], now)

    assert decision.allowed is allowed
    assert decision.lateness == lateness


def test_seconds_do_not_move_the_boundary():
    decision = ScheduleEligibilityResolver().resolve([MONDAY_CLASS], datetime(2024, 9, 2, 9, 10, 59))
    assert decision.lateness == Lateness.ON_TIME


def test_no_class_today_is_rejected():
    tuesday = datetime(2024, 9, 3, 9, 0)
    decision = ScheduleEligibilityResolver().resolve([MONDAY_CLASS], tuesday)

    assert decision.allowed is False
    assert decision.entry is None
    assert "No class" in decision.reason


def test_picks_entry_for_current_weekday():
    wednesday_class = ScheduleEntry(
        schedule_id=2,
        course_id=1,
        day_of_week=DayOfWeek.WEDNESDAY,
        start_time=time(13, 0),
        end_time=time(14, 0),
        location=Coordinate(1.0, 1.0),
    )
    decision = ScheduleEligibilityResolver().resolve([MONDAY_CLASS, wednesday_class], datetime(2024, 9, 4, 13, 5))

    assert decision.allowed is True
    assert decision.entry == wednesday_class


def test_thresholds_are_configurable():
    resolver = ScheduleEligibilityResolver(early_admission_minutes=5, late_threshold_minutes=0)

    assert resolver.resolve([MONDAY_CLASS], monday(8, 50)).allowed is False
    assert resolver.resolve([MONDAY_CLASS], monday(8, 55)).allowed is True
    assert resolver.resolve([MONDAY_CLASS], monday(9, 0)).lateness == Lateness.ON_TIME
    assert resolver.resolve([MONDAY_CLASS], monday(9, 1)).lateness == Lateness.LATE
