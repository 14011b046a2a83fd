from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Lateness
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, lateness: Lateness) -> AttendanceStrategy:
        if lateness == Lateness.LATE:
            return LateStrategy()
        return PresentStrategy()
