from __future__ import annotations

from ._calendar import (
    FieldValues,
    fields_of,
    is_leap_year,
    last_day_of_month,
    resolve_tz,
    to_datetime,
)
from ._error import CronMatchError, CronMatchErrorKind
from ._field import FieldSpec
from ._matcher import (
    AlwaysMatch,
    DayOfMonthMatch,
    DiscreteSet,
    FieldMatcher,
    check_range,
    min_value,
)
from ._pattern import MAX_ITERATIONS, ScheduleMatcher

__all__ = [
    "ScheduleMatcher",
    "FieldSpec",
    "FieldMatcher",
    "AlwaysMatch",
    "DiscreteSet",
    "DayOfMonthMatch",
    "min_value",
    "check_range",
    "FieldValues",
    "fields_of",
    "to_datetime",
    "is_leap_year",
    "last_day_of_month",
    "resolve_tz",
    "CronMatchError",
    "CronMatchErrorKind",
    "MAX_ITERATIONS",
]
