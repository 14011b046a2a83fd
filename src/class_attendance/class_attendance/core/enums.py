from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"


class VerificationMethod(str, Enum):
    """How a record's status was accepted."""

    GEOLOCATION = "geolocation"
    MANUAL = "manual"


class Lateness(str, Enum):
    ON_TIME = "on_time"
    LATE = "late"


class DayOfWeek(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        """Map ``date.weekday()`` (Monday == 0) to a member."""
        return list(cls)[weekday]


class GroupBy(str, Enum):
    """Trend bucket granularity."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class BatchOutcome(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    MISSING_FIELD = "missing-field"
    INVALID_FIELD = "invalid-field"
    UNKNOWN_PERSON = "unknown-person"
    UNKNOWN_COURSE = "unknown-course"


class RequestStatus(str, Enum):
    """Review state of a permission (leave) request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClassTiming(str, Enum):
    ONGOING = "ongoing"
    UPCOMING = "upcoming"
