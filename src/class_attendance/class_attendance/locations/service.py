from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import minutes_since_midnight, now_local
from ..common.validators import require_coordinate
from ..core.constants import DEFAULT_NEARBY_MAX_DISTANCE_METERS, UPCOMING_CLASS_WINDOW_MINUTES
from ..core.enums import ClassTiming, DayOfWeek
from ..core.exceptions import ValidationError
from ..courses.repository import CourseRepository
from ..geo.distance import Coordinate, haversine_distance
from ..schedules.model import ScheduleEntry
from ..schedules.repository import ScheduleRepository
from .model import NearbyClass


class NearbyClassFinder:
    """Today's classes a person can walk into: ongoing now, or starting within
    ``upcoming_window_minutes``, located within ``max_distance`` of the person."""

    def __init__(
        self,
        courses: CourseRepository,
        schedules: ScheduleRepository,
        *,
        upcoming_window_minutes: int = UPCOMING_CLASS_WINDOW_MINUTES,
    ):
        self._courses = courses
        self._schedules = schedules
        self._upcoming = int(upcoming_window_minutes)

    def _timing(self, entry: ScheduleEntry, current: int) -> Optional[ClassTiming]:
        start = minutes_since_midnight(entry.start_time)
        end = minutes_since_midnight(entry.end_time)
        if start <= current <= end:
            return ClassTiming.ONGOING
        if 0 < start - current <= self._upcoming:
            return ClassTiming.UPCOMING
        return None

    def nearby_classes(
        self,
        person_id: int,
        location: Coordinate,
        *,
        max_distance: float = DEFAULT_NEARBY_MAX_DISTANCE_METERS,
        now: datetime | None = None,
    ) -> list[NearbyClass]:
        now = now or now_local()
        location = require_coordinate(location.lat, location.lon)
        if max_distance < 0:
            raise ValidationError("max_distance must not be negative")

        today = DayOfWeek.from_weekday(now.weekday())
        current = minutes_since_midnight(now)

        found: list[NearbyClass] = []
        for course in self._courses.courses_for_person(person_id):
            for entry in self._schedules.schedules_for(course.course_id):
                if entry.day_of_week != today:
                    continue
                timing = self._timing(entry, current)
                if timing is None:
                    continue
                distance = haversine_distance(location, entry.location)
                if distance > max_distance:
                    continue
                found.append(
                    NearbyClass(
                        course_id=course.course_id,
                        code=course.code,
                        name=course.name,
                        start_time=entry.start_time,
                        end_time=entry.end_time,
                        location=entry.location,
                        distance_meters=distance,
                        timing=timing,
                    )
                )

        found.sort(key=lambda c: (c.distance_meters, c.start_time, c.course_id))
        return found
