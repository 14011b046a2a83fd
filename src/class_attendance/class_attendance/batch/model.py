from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import BatchOutcome, SkipReason


@dataclass(frozen=True)
class BatchEntry:
    """One externally supplied row. Values are kept raw; the reconciler validates them."""

    person: Any = None
    course: Any = None
    date: Any = None
    status: Any = None
    note: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BatchEntry":
        return cls(
            person=data.get("person", data.get("student")),
            course=data.get("course"),
            date=data.get("date"),
            status=data.get("status"),
            note=data.get("note"),
        )


@dataclass(frozen=True)
class BatchEntryResult:
    index: int
    outcome: BatchOutcome
    reason: Optional[SkipReason] = None
    message: Optional[str] = None
    record: Optional[AttendanceRecord] = None

    @property
    def ok(self) -> bool:
        return self.outcome == BatchOutcome.SUCCESS


@dataclass(frozen=True)
class BatchResult:
    results: list[BatchEntryResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.ok)
