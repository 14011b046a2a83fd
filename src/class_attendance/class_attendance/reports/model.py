from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class PersonStats:
    person_id: int
    full_name: str
    external_code: Optional[str]
    total: int
    counts: dict[AttendanceStatus, int]
    attendance_rate: int


@dataclass(frozen=True)
class CourseStats:
    course_id: int
    code: str
    total: int
    counts: dict[AttendanceStatus, int]
