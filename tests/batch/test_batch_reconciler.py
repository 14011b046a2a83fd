from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest

from class_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from class_attendance.attendance.service import AttendanceService
from class_attendance.batch.model import BatchEntry
from class_attendance.batch.service import BatchReconciler
from class_attendance.core.enums import AttendanceStatus, BatchOutcome, SkipReason, VerificationMethod
from class_attendance.core.exceptions import StorageUnavailable
from class_attendance.geo.distance import Coordinate
from class_attendance.people.model import Person
from class_attendance.people.resolver import PersonResolver


@pytest.fixture
def reconciler(service, people, courses):
    return BatchReconciler(service, PersonResolver(people), courses)


def valid(person, **overrides) -> dict:
    entry = {"person": person, "course": 1, "date": "2024-09-02", "status": "present"}
    entry.update(overrides)
    return entry


def test_mixed_batch_reports_each_entry(reconciler):
    result = reconciler.reconcile_batch([valid("S100"), valid(""), valid("S999")])

    assert [r.outcome for r in result.results] == [BatchOutcome.SUCCESS, BatchOutcome.SKIPPED, BatchOutcome.SKIPPED]
    assert [r.reason for r in result.results] == [None, SkipReason.MISSING_FIELD, SkipReason.UNKNOWN_PERSON]
    assert result.success_count == 1
    assert [r.index for r in result.results] == [0, 1, 2]


@pytest.mark.parametrize("missing", ["person", "course", "date", "status"])
def test_each_required_field(reconciler, missing):
    entry = valid("S100")
    entry[missing] = None

    result = reconciler.reconcile_batch([entry])

    assert result.results[0].reason == SkipReason.MISSING_FIELD
    assert missing in result.results[0].message


def test_invalid_values_are_skipped(reconciler):
    result = reconciler.reconcile_batch([valid("S100", status="maybe"), valid("S100", date="02/09/2024")])

    assert [r.reason for r in result.results] == [SkipReason.INVALID_FIELD, SkipReason.INVALID_FIELD]
    assert result.success_count == 0


def test_digit_string_prefers_external_code(reconciler, people, attendance_repo):
    people.add(Person(person_id=7, full_name="Carla", external_code="3"))

    result = reconciler.reconcile_batch([valid("3")])

    assert result.results[0].record.person_id == 7
    assert attendance_repo.get_for_key(person_id=3, course_id=1, calendar_day=date(2024, 9, 2)) is None


def test_digit_string_falls_back_to_internal_id(reconciler):
    result = reconciler.reconcile_batch([valid("2"), valid(3), valid("99")])

    assert result.results[0].record.person_id == 2
    assert result.results[1].record.person_id == 3
    assert result.results[2].reason == SkipReason.UNKNOWN_PERSON


def test_course_resolves_by_code_or_id(reconciler):
    result = reconciler.reconcile_batch([valid("S100", course="CS202"), valid("S100", course="1"), valid("S100", course="XX")])

    assert result.results[0].record.course_id == 2
    assert result.results[1].record.course_id == 1
    assert result.results[2].reason == SkipReason.UNKNOWN_COURSE


def test_back_fill_upserts_without_location(reconciler, service, attendance_repo):
    now = datetime(2024, 9, 2, 9, 0)
    checked_in = service.check_in(2, 1, location=Coordinate(0.0003, 0.0), now=now).record

    result = reconciler.reconcile_batch([valid("S100", status="Excused", note="Sick leave")])
    record = result.results[0].record

    assert attendance_repo.count() == 1
    assert record.attendance_id == checked_in.attendance_id
    assert record.status == AttendanceStatus.EXCUSED
    assert record.verification_method == VerificationMethod.MANUAL
    assert record.notes == "Sick leave"
    assert record.check_in_time == checked_in.check_in_time


def test_blank_note_keeps_existing_note(reconciler):
    reconciler.reconcile_batch([valid("S100", status="absent", note="No show")])
    result = reconciler.reconcile_batch([valid("S100", status="excused", note="  ")])

    assert result.results[0].record.notes == "No show"


class FailingForPerson(InMemoryAttendanceRepository):
    def upsert_status(self, write):
        if write.person_id == 3:
            raise StorageUnavailable("connection lost")
        return super().upsert_status(write)


def test_one_failing_entry_does_not_abort_batch(schedules, people, courses):
    service = AttendanceService(FailingForPerson(), schedules, people, courses)
    reconciler = BatchReconciler(service, PersonResolver(people), courses)

    result = reconciler.reconcile_batch([valid("S101"), valid("S100")])

    assert result.results[0].outcome == BatchOutcome.FAILED
    assert "connection lost" in result.results[0].message
    assert result.results[1].outcome == BatchOutcome.SUCCESS
    assert result.success_count == 1


def test_concurrent_workers_keep_input_order(service, people, courses):
    reconciler = BatchReconciler(service, PersonResolver(people), courses, max_workers=4)
    entries = [valid("S100", date=f"2024-09-{d:02d}") for d in range(1, 21)]
    entries.append(BatchEntry(person="S999", course=1, date="2024-09-01", status="present"))

    result = reconciler.reconcile_batch(entries)

    assert [r.index for r in result.results] == list(range(21))
    assert [r.record.calendar_day.day for r in result.results[:20]] == list(range(1, 21))
    assert result.results[20].reason == SkipReason.UNKNOWN_PERSON
    assert result.success_count == 20


class DroppedCursor:
    def execute(self, *args, **kwargs):
        raise mysql.connector.errors.OperationalError(msg="Lost connection to MySQL server during query", errno=2013)

    def close(self):
        pass


class DroppedConnection:
    def cursor(self, dictionary=True):
        return DroppedCursor()

    def commit(self):
        pass

    def rollback(self):
        raise mysql.connector.errors.OperationalError(msg="MySQL Connection not available", errno=2055)

    def close(self):
        pass


class DroppedConnectionFactory:
    def connect(self):
        return DroppedConnection()


def test_dropped_connection_fails_each_entry(schedules, people, courses):
    service = AttendanceService(MySQLAttendanceRepository(DroppedConnectionFactory()), schedules, people, courses)
    reconciler = BatchReconciler(service, PersonResolver(people), courses)

    result = reconciler.reconcile_batch([valid("S100"), valid("S101")])

    assert [r.outcome for r in result.results] == [BatchOutcome.FAILED, BatchOutcome.FAILED]
    assert all("Lost connection" in r.message for r in result.results)
    assert result.success_count == 0


class BrokenRepository(InMemoryAttendanceRepository):
    def upsert_status(self, write):
        if write.person_id == 2:
            raise RuntimeError("unexpected")
        return super().upsert_status(write)


def test_unexpected_error_stays_in_its_slot(schedules, people, courses):
    service = AttendanceService(BrokenRepository(), schedules, people, courses)
    reconciler = BatchReconciler(service, PersonResolver(people), courses, max_workers=2)

    result = reconciler.reconcile_batch([valid("S100"), valid("S101")])

    assert result.results[0].outcome == BatchOutcome.FAILED
    assert result.results[0].message == "unexpected"
    assert result.results[1].outcome == BatchOutcome.SUCCESS
