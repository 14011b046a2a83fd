"""Counts, percentages and time-bucketed trends over attendance records.

Percentages are ``round(count / total * 100)`` with halves rounded up, and
every status key is always present (zeros when there are no records). Trend
buckets are rounded independently of each other.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, Sequence

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, GroupBy


@dataclass(frozen=True)
class Summary:
    total: int
    counts: dict[AttendanceStatus, int]
    percentages: dict[AttendanceStatus, int]


@dataclass(frozen=True)
class TrendBucket:
    key: str
    total: int
    counts: dict[AttendanceStatus, int]
    percentages: dict[AttendanceStatus, int]


def percentage(count: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(math.floor(count / total * 100 + 0.5))


def count_by_status(records: Iterable[AttendanceRecord]) -> dict[AttendanceStatus, int]:
    counts = {s: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status] += 1
    return counts


def summarize(records: Sequence[AttendanceRecord]) -> Summary:
    counts = count_by_status(records)
    total = sum(counts.values())
    return Summary(
        total=total,
        counts=counts,
        percentages={s: percentage(c, total) for s, c in counts.items()},
    )


def _daily_key(day: date) -> str:
    return day.isoformat()


def _weekly_key(day: date) -> str:
    # Monday of the containing week; Sunday belongs to the week that started six days earlier.
    return (day - timedelta(days=day.weekday())).isoformat()


def _monthly_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


_BUCKET_KEYS: dict[GroupBy, Callable[[date], str]] = {
    GroupBy.DAILY: _daily_key,
    GroupBy.WEEKLY: _weekly_key,
    GroupBy.MONTHLY: _monthly_key,
}


def bucket_key(day: date, group_by: GroupBy) -> str:
    return _BUCKET_KEYS[GroupBy(group_by)](day)


def aggregate(records: Sequence[AttendanceRecord], group_by: GroupBy) -> list[TrendBucket]:
    grouped: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for r in records:
        grouped[bucket_key(r.calendar_day, group_by)].append(r)

    buckets = []
    # ISO keys sort chronologically as strings.
    for key in sorted(grouped):
        s = summarize(grouped[key])
        buckets.append(TrendBucket(key=key, total=s.total, counts=s.counts, percentages=s.percentages))
    return buckets
