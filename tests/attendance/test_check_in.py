from __future__ import annotations

import pytest

from class_attendance.core.enums import AttendanceStatus, VerificationMethod
from class_attendance.core.exceptions import (
    IneligibleWindow,
    NotEnrolled,
    UnknownCourse,
    UnknownPerson,
    ValidationError,
)
from class_attendance.geo.distance import Coordinate

NEAR = Coordinate(0.0003, 0.0)  # ~33 m from class
FAR = Coordinate(0.0010, 0.0)  # ~111 m from class


def test_on_time_inside_geofence_is_present_geolocation(service, monday_at):
    outcome = service.check_in(2, 1, location=NEAR, now=monday_at(8, 50))

    assert outcome.within_radius is True
    assert round(outcome.distance_meters) == 33
    assert outcome.record.status == AttendanceStatus.PRESENT
    assert outcome.record.verification_method == VerificationMethod.GEOLOCATION
    assert outcome.record.notes == ""
    assert outcome.record.calendar_day == monday_at(0, 0).date()
    assert outcome.record.reported_location == NEAR


def test_after_threshold_is_late(service, monday_at):
    outcome = service.check_in(2, 1, location=NEAR, now=monday_at(9, 12))
    assert outcome.record.status == AttendanceStatus.LATE


def test_outside_geofence_still_present_but_flagged(service, monday_at):
    outcome = service.check_in(2, 1, location=FAR, now=monday_at(8, 50))

    assert outcome.within_radius is False
    assert outcome.record.status == AttendanceStatus.PRESENT
    assert outcome.record.verification_method == VerificationMethod.MANUAL
    assert "111m" in outcome.record.notes


@pytest.mark.parametrize("hour, minute", [(8, 44), (10, 1)])
def test_outside_window_writes_nothing(service, attendance_repo, monday_at, hour, minute):
    with pytest.raises(IneligibleWindow):
        service.check_in(2, 1, location=NEAR, now=monday_at(hour, minute))

    assert attendance_repo.count() == 0


def test_no_class_today(service, attendance_repo, monday_at):
    tuesday = monday_at(9, 0).replace(day=3)
    with pytest.raises(IneligibleWindow):
        service.check_in(2, 1, location=NEAR, now=tuesday)
    assert attendance_repo.count() == 0


def test_resubmission_overwrites_and_keeps_check_out(service, attendance_repo, monday_at):
    first = service.check_in(2, 1, location=FAR, now=monday_at(8, 50)).record
    service.check_out(2, 1, now=monday_at(9, 5))

    second = service.check_in(2, 1, location=NEAR, now=monday_at(9, 15)).record

    assert attendance_repo.count() == 1
    assert second.attendance_id == first.attendance_id
    assert second.status == AttendanceStatus.LATE
    assert second.verification_method == VerificationMethod.GEOLOCATION
    assert second.notes == ""
    assert second.reported_location == NEAR
    assert second.check_in_time == monday_at(9, 15)
    assert second.check_out_time == monday_at(9, 5)


def test_older_check_in_does_not_override_newer(service, monday_at):
    service.check_in(2, 1, location=NEAR, now=monday_at(9, 20))
    record = service.check_in(2, 1, location=FAR, now=monday_at(8, 50)).record

    assert record.check_in_time == monday_at(9, 20)
    assert record.status == AttendanceStatus.LATE
    assert record.reported_location == NEAR


def test_separate_days_and_people_get_separate_records(service, attendance_repo, monday_at):
    service.check_in(2, 1, location=NEAR, now=monday_at(8, 50))
    service.check_in(3, 1, location=NEAR, now=monday_at(8, 50))
    next_monday = monday_at(8, 50).replace(day=9)
    service.check_in(2, 1, location=NEAR, now=next_monday)

    assert attendance_repo.count() == 3


def test_unknown_person(service, monday_at):
    with pytest.raises(UnknownPerson):
        service.check_in(99, 1, location=NEAR, now=monday_at(9, 0))


def test_unknown_course(service, monday_at):
    with pytest.raises(UnknownCourse):
        service.check_in(2, 99, location=NEAR, now=monday_at(9, 0))


def test_not_enrolled(service, monday_at):
    with pytest.raises(NotEnrolled):
        service.check_in(4, 1, location=NEAR, now=monday_at(9, 0))


def test_out_of_range_coordinates_rejected(service, attendance_repo, monday_at):
    with pytest.raises(ValidationError):
        service.check_in(2, 1, location=Coordinate(91.0, 0.0), now=monday_at(9, 0))
    assert attendance_repo.count() == 0
