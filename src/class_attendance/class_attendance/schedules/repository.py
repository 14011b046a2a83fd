from __future__ import annotations

from typing import Protocol, Sequence

from .model import ScheduleEntry


class ScheduleRepository(Protocol):
    """Read-only weekly schedule lookup owned by course management."""

    def schedules_for(self, course_id: int) -> Sequence[ScheduleEntry]:
        raise NotImplementedError
