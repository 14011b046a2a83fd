"""Decide whether "now" is inside a course's check-in window.

The window opens ``early_admission_minutes`` before the scheduled start and
closes at the scheduled end (both inclusive). A check-in later than
``late_threshold_minutes`` after the start is late.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import minutes_since_midnight
from ..core.constants import DEFAULT_EARLY_ADMISSION_MINUTES, DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import DayOfWeek, Lateness
from .model import ScheduleEntry


@dataclass(frozen=True)
class EligibilityDecision:
    allowed: bool
    entry: Optional[ScheduleEntry] = None
    lateness: Optional[Lateness] = None
    reason: Optional[str] = None


class ScheduleEligibilityResolver:
    def __init__(
        self,
        *,
        early_admission_minutes: int = DEFAULT_EARLY_ADMISSION_MINUTES,
        late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    ):
        self._early = int(early_admission_minutes)
        self._late = int(late_threshold_minutes)

    def resolve(self, entries: Sequence[ScheduleEntry], now: datetime) -> EligibilityDecision:
        today = DayOfWeek.from_weekday(now.weekday())
        entry = next((e for e in entries if e.day_of_week == today), None)
        if entry is None:
            return EligibilityDecision(allowed=False, reason="No class scheduled for today")

        current = minutes_since_midnight(now)
        start = minutes_since_midnight(entry.start_time)
        end = minutes_since_midnight(entry.end_time)

        if current < start - self._early or current > end:
            return EligibilityDecision(
                allowed=False,
                entry=entry,
                reason=(
                    f"Check-in only allowed from {self._early} minutes before class until end of class "
                    f"({entry.start_time:%H:%M} - {entry.end_time:%H:%M})"
                ),
            )

        lateness = Lateness.LATE if current > start + self._late else Lateness.ON_TIME
        return EligibilityDecision(allowed=True, entry=entry, lateness=lateness)
