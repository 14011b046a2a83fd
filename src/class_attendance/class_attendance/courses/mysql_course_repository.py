from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Course
from .repository import CourseRepository


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT course_id, code, name FROM courses WHERE course_id=%s", (int(course_id),))
            r = fetchone(cur)
            if not r:
                return None
            return Course(course_id=int(r["course_id"]), code=r["code"], name=r["name"])

    def get_by_code(self, code: str) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT course_id, code, name FROM courses WHERE code=%s", (code,))
            r = fetchone(cur)
            if not r:
                return None
            return Course(course_id=int(r["course_id"]), code=r["code"], name=r["name"])

    def is_enrolled(self, *, course_id: int, person_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS ok FROM enrollments WHERE course_id=%s AND person_id=%s",
                (int(course_id), int(person_id)),
            )
            return fetchone(cur) is not None

    def enrolled_person_ids(self, course_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT person_id FROM enrollments WHERE course_id=%s ORDER BY person_id ASC",
                (int(course_id),),
            )
            return [int(r["person_id"]) for r in fetchall(cur)]

    def courses_for_person(self, person_id: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.course_id, c.code, c.name
                FROM enrollments e
                JOIN courses c ON c.course_id = e.course_id
                WHERE e.person_id=%s
                ORDER BY c.course_id ASC
                """,
                (int(person_id),),
            )
            return [Course(course_id=int(r["course_id"]), code=r["code"], name=r["name"]) for r in fetchall(cur)]
