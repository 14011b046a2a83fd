from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def status(self) -> AttendanceStatus:
        return AttendanceStatus.LATE
