from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import DayOfWeek
from ..geo.distance import Coordinate


@dataclass(frozen=True)
class ScheduleEntry:
    """Domain entity: one weekly slot of a course, with its class location."""

    schedule_id: int
    course_id: int
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    location: Coordinate
