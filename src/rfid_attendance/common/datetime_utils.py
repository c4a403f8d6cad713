from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Current local time as a naive datetime.

    Note: Wrapped so tests can patch/mocked easier. When `tz_name` is given the
    wall clock of that zone is used, otherwise the server clock.
    """
    if tz_name:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    return datetime.now()


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
