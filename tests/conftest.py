from __future__ import annotations

import re
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from cronmatch import ScheduleMatcher


def parse_zoned(s: str) -> datetime:
    """Parse '2026-02-06T12:00:00+00:00[UTC]' into a timezone-aware datetime."""
    # Extract the IANA timezone name from brackets
    m = re.match(r"^(.+)\[(.+)\]$", s)
    if not m:
        raise ValueError(f"expected format 'ISO[TZ]', got: {s}")
    iso_part, tz_name = m.group(1), m.group(2)
    tz = ZoneInfo(tz_name)
    dt = datetime.fromisoformat(iso_part)
    # Convert to the named timezone
    return dt.astimezone(tz)


def format_zoned(dt: datetime) -> str:
    """Format a timezone-aware datetime as '2026-02-06T12:00:00+00:00[TZ]'."""
    tz = dt.tzinfo
    if tz is None:
        raise ValueError("datetime must be timezone-aware")
    tz_name = tz.key if hasattr(tz, "key") else str(tz)
    return f"{dt.isoformat()}[{tz_name}]"


def brute_force_next(
    schedule: ScheduleMatcher, after: datetime, limit: timedelta, step: timedelta
) -> datetime | None:
    """Scan forward one step at a time; the slow, obviously correct answer.

    `after` must be aligned to `step`.
    """
    current = after + step
    end = after + limit
    while current <= end:
        if schedule.matches_datetime(current):
            return current
        current += step
    return None

