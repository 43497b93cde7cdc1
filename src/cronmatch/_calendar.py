from __future__ import annotations

import calendar
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from ._field import FieldSpec

# One slot per FieldSpec ordinal: 1-based month, 0-based weekday (Sunday=0).
FieldValues = tuple[int, int, int, int, int, int, int]

_SECOND = FieldSpec.SECOND.ordinal
_MINUTE = FieldSpec.MINUTE.ordinal
_HOUR = FieldSpec.HOUR.ordinal
_DAY = FieldSpec.DAY_OF_MONTH.ordinal
_MONTH = FieldSpec.MONTH.ordinal
_YEAR = FieldSpec.YEAR.ordinal

# Days per month in a common year, 1-based.
_MONTH_LENGTHS = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def resolve_tz(tz: str | ZoneInfo | None) -> ZoneInfo:
    """Resolve timezone, defaulting to UTC for deterministic behavior."""
    if isinstance(tz, ZoneInfo):
        return tz
    return ZoneInfo(tz) if tz else ZoneInfo("UTC")


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def last_day_of_month(month: int, is_leap: bool) -> int:
    if month == 2 and is_leap:
        return 29
    return _MONTH_LENGTHS[month]


def days_in_month(year: int, month: int) -> int:
    return last_day_of_month(month, is_leap_year(year))


def cron_weekday(year: int, month: int, day: int) -> int:
    """Cron day of week for a date: Sunday=0, Monday=1, ..., Saturday=6."""
    return (calendar.weekday(year, month, day) + 1) % 7


def fields_of(dt: datetime, next_second: bool = False) -> FieldValues:
    """Extract the field vector of a datetime, optionally one second later.

    Sub-second precision is dropped before advancing.
    """
    dt = dt.replace(microsecond=0)
    if next_second:
        dt += timedelta(seconds=1)
    return (
        dt.second,
        dt.minute,
        dt.hour,
        dt.day,
        dt.month,
        dt.isoweekday() % 7,
        dt.year,
    )


def with_weekday(values: list[int]) -> FieldValues:
    """Freeze a working vector, recomputing the weekday slot from its date."""
    values[FieldSpec.DAY_OF_WEEK.ordinal] = cron_weekday(
        values[_YEAR], values[_MONTH], values[_DAY]
    )
    return tuple(values)  # type: ignore[return-value]


def to_datetime(values: FieldValues, tz: ZoneInfo) -> datetime:
    """Build an aware datetime from a field vector.

    The weekday slot is ignored; the date determines it. Ambiguous wall times
    resolve to the first occurrence (fold=0) and times inside a DST gap are
    pushed forward past the gap.
    """
    naive = datetime(
        values[_YEAR],
        values[_MONTH],
        values[_DAY],
        values[_HOUR],
        values[_MINUTE],
        values[_SECOND],
    )
    aware = naive.replace(tzinfo=tz, fold=0)
    # Normalize through UTC round-trip to handle spring-forward gaps
    return datetime.fromtimestamp(aware.timestamp(), tz=tz)
