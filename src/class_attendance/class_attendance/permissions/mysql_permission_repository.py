from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import NewPermissionRequest, PermissionFilter, PermissionRequest
from .repository import PermissionRepository

_COLUMNS = """
    request_id, person_id, course_id, kind, reason, start_date, end_date,
    status, created_at, decided_by, decided_at, review_notes
"""


def _to_entity(r: dict) -> PermissionRequest:
    decided_by = r.get("decided_by")
    return PermissionRequest(
        request_id=int(r["request_id"]),
        person_id=int(r["person_id"]),
        course_id=int(r["course_id"]),
        kind=r["kind"],
        reason=r["reason"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        decided_by=int(decided_by) if decided_by is not None else None,
        decided_at=r.get("decided_at"),
        review_notes=r.get("review_notes"),
    )


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, cur, request_id: int) -> Optional[PermissionRequest]:
        cur.execute(f"SELECT {_COLUMNS} FROM permission_requests WHERE request_id=%s", (int(request_id),))
        r = fetchone(cur)
        return _to_entity(r) if r else None

    def create(self, new: NewPermissionRequest) -> PermissionRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO permission_requests(
                    person_id, course_id, kind, reason, start_date, end_date, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.person_id),
                    int(new.course_id),
                    new.kind,
                    new.reason,
                    new.start_date,
                    new.end_date,
                    RequestStatus.PENDING.value,
                    new.created_at,
                ),
            )
            return self._select(cur, int(cur.lastrowid))

    def get_by_id(self, request_id: int) -> Optional[PermissionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select(cur, request_id)

    def list_requests(self, criteria: PermissionFilter, *, limit: int) -> Sequence[PermissionRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if criteria.status is not None:
            clauses.append("status=%s")
            params.append(criteria.status.value)
        if criteria.person_id is not None:
            clauses.append("person_id=%s")
            params.append(int(criteria.person_id))
        if criteria.course_id is not None:
            clauses.append("course_id=%s")
            params.append(int(criteria.course_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM permission_requests
                WHERE {where}
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_entity(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        review_notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE permission_requests
                SET status=%s, decided_by=%s, decided_at=%s, review_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    review_notes,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_pending(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM permission_requests WHERE request_id=%s AND status=%s",
                (int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
