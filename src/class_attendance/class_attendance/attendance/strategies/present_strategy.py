from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy


class PresentStrategy(AttendanceStrategy):
    """On-time check-in."""

    def status(self) -> AttendanceStatus:
        return AttendanceStatus.PRESENT
