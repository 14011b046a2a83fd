from __future__ import annotations

from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_like(value) -> date:
    """Accept a date, a datetime or an ISO string (``YYYY-MM-DD[THH:MM...]``)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    return parse_iso_date(text[:10])


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def calendar_day(moment: datetime) -> date:
    """Truncate a local timestamp to the day used in the per-day record key."""
    return moment.date()


def minutes_since_midnight(value: datetime | time) -> int:
    return value.hour * 60 + value.minute
