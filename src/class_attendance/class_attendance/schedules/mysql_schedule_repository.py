from __future__ import annotations

from typing import Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from ..geo.distance import Coordinate
from .model import ScheduleEntry
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def schedules_for(self, course_id: int) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, course_id, day_of_week, start_time, end_time, latitude, longitude
                FROM course_schedules
                WHERE course_id=%s
                ORDER BY schedule_id ASC
                """,
                (int(course_id),),
            )
            rows = fetchall(cur)
            return [
                ScheduleEntry(
                    schedule_id=int(r["schedule_id"]),
                    course_id=int(r["course_id"]),
                    day_of_week=DayOfWeek(r["day_of_week"]),
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    location=Coordinate(lat=float(r["latitude"]), lon=float(r["longitude"])),
                )
                for r in rows
            ]
