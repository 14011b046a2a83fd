from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Person
from .repository import PersonRepository


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _to_entity(self, r: dict) -> Person:
        return Person(
            person_id=int(r["person_id"]),
            full_name=r["full_name"],
            external_code=r.get("external_code"),
        )

    def get_by_id(self, person_id: int) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT person_id, full_name, external_code FROM people WHERE person_id=%s",
                (int(person_id),),
            )
            r = fetchone(cur)
            return self._to_entity(r) if r else None

    def get_by_external_code(self, code: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT person_id, full_name, external_code FROM people WHERE external_code=%s",
                (code,),
            )
            r = fetchone(cur)
            return self._to_entity(r) if r else None
