from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from ._calendar import (
    FieldValues,
    days_in_month,
    fields_of,
    is_leap_year,
    resolve_tz,
    to_datetime,
    with_weekday,
)
from ._field import FieldSpec
from ._matcher import AlwaysMatch, DayOfMonthMatch, FieldMatcher, check_range, min_value

logger = logging.getLogger(__name__)

# =============================================================================
# Search Limits
# =============================================================================
# MAX_ITERATIONS (1000): maximum carry passes per next-occurrence search.
# Each pass either lands on a match or moves the candidate strictly forward,
# and the year field is bounded by FieldSpec.YEAR.max, so the limit is only a
# backstop. The worst realistic schedules (Feb 29 on a given weekday) need a
# handful of passes per candidate year.
# =============================================================================

MAX_ITERATIONS = 1000

_SECOND = FieldSpec.SECOND.ordinal
_HOUR = FieldSpec.HOUR.ordinal
_DAY = FieldSpec.DAY_OF_MONTH.ordinal
_MONTH = FieldSpec.MONTH.ordinal
_WEEKDAY = FieldSpec.DAY_OF_WEEK.ordinal
_YEAR = FieldSpec.YEAR.ordinal


class ScheduleMatcher:
    """Seven field matchers forming one schedule.

    Matchers are held in a tuple indexed by ``FieldSpec.ordinal``::

        0      1      2     3             4      5            6
        SECOND MINUTE HOUR  DAY_OF_MONTH  MONTH  DAY_OF_WEEK  YEAR

    Instances hold no mutable state and may be shared between threads.
    """

    _matchers: tuple[FieldMatcher, ...]

    def __init__(
        self,
        second: FieldMatcher,
        minute: FieldMatcher,
        hour: FieldMatcher,
        day_of_month: FieldMatcher,
        month: FieldMatcher,
        day_of_week: FieldMatcher,
        year: FieldMatcher,
    ) -> None:
        self._matchers = (second, minute, hour, day_of_month, month, day_of_week, year)
        # fail at construction, not halfway through a search
        for spec in FieldSpec:
            min_value(spec, self._matchers[spec.ordinal])
            check_range(spec, self._matchers[spec.ordinal])

    @classmethod
    def build(cls, **fields: FieldMatcher) -> ScheduleMatcher:
        """Build from keyword matchers; fields not named match everything."""
        unknown = set(fields) - {spec.value for spec in FieldSpec}
        if unknown:
            raise TypeError(f"unknown schedule fields: {', '.join(sorted(unknown))}")
        return cls(*(fields.get(spec.value, AlwaysMatch(spec)) for spec in FieldSpec))

    def get(self, spec: FieldSpec) -> FieldMatcher:
        return self._matchers[spec.ordinal]

    # --- Matching ---

    def matches(
        self,
        second: int,
        minute: int,
        hour: int,
        day_of_month: int,
        month: int,
        day_of_week: int,
        year: int,
    ) -> bool:
        """Whether the field values satisfy every matcher.

        A negative ``second`` skips the second field, for minute-granularity
        schedules.
        """
        m = self._matchers
        return (
            (second < 0 or m[0].matches(second))
            and m[1].matches(minute)
            and m[2].matches(hour)
            and _matches_day_of_month(m[3], day_of_month, month, is_leap_year(year))
            and m[4].matches(month)
            and _matches_weekday(m[5], day_of_week)
            and m[6].matches(year)
        )

    def matches_datetime(self, dt: datetime, match_second: bool = True) -> bool:
        values = fields_of(dt)
        if not match_second:
            values = (-1,) + values[1:]  # type: ignore[assignment]
        return self.matches(*values)

    # --- Next occurrence ---

    def next_occurrence_after(
        self, values: FieldValues, tz: str | ZoneInfo | None = None
    ) -> datetime | None:
        """Earliest instant strictly after ``values`` that matches, or None.

        ``values`` uses the public conventions (1-based month, Sunday=0). The
        weekday slot is recomputed from the date. ``tz`` is an IANA name or
        ZoneInfo; it defaults to UTC.
        """
        zone = resolve_tz(tz)
        start = fields_of(to_datetime(values, zone), next_second=True)
        found = self._search(start)
        if found is None:
            return None
        return to_datetime(found, zone)

    def next_from(self, now: datetime) -> datetime | None:
        """Next occurrence strictly after `now`, in `now`'s zone.

        Naive and fixed-offset datetimes are read as UTC.
        """
        if isinstance(now.tzinfo, ZoneInfo):
            zone = now.tzinfo
        else:
            zone = ZoneInfo("UTC")
            now = now.replace(tzinfo=zone) if now.tzinfo is None else now.astimezone(zone)
        result = self.next_occurrence_after(fields_of(now), zone)
        # ambiguous wall times resolve to their first occurrence, which can precede `now`
        while result is not None and result <= now:
            result = self.next_occurrence_after(fields_of(result), zone)
        return result

    def next_n_from(self, now: datetime, n: int) -> list[datetime]:
        results: list[datetime] = []
        current = now
        for _ in range(n):
            nxt = self.next_from(current)
            if nxt is None:
                break
            current = nxt
            results.append(nxt)
        return results

    def occurrences(self, from_: datetime) -> Iterator[datetime]:
        """Returns a lazy iterator of occurrences strictly after `from_`.

        The iterator ends when the schedule has no further occurrence within
        the supported year range.
        """
        current = from_
        while True:
            nxt = self.next_from(current)
            if nxt is None:
                return
            current = nxt
            yield nxt

    def between(self, from_: datetime, to: datetime) -> Iterator[datetime]:
        """Returns a bounded iterator of occurrences where `from_ < occurrence <= to`."""
        for dt in self.occurrences(from_):
            if dt > to:
                return
            yield dt

    def _search(self, start: FieldValues) -> FieldValues | None:
        """Earliest matching vector at or after ``start``."""
        current = start
        for _ in range(MAX_ITERATIONS):
            if current[_YEAR] > FieldSpec.YEAR.max:
                logger.debug("no occurrence before year %d", FieldSpec.YEAR.max)
                return None
            if self.matches(*current):
                return current
            candidate = self._carry(current)
            if candidate is None:
                logger.debug("borrow ran past the year field from %s", current)
                return None
            current = candidate
        logger.debug("gave up after %d passes at %s", MAX_ITERATIONS, current)
        return None

    def _carry(self, values: FieldValues) -> FieldValues | None:
        """One carry pass over a non-matching vector.

        Scans from YEAR down to SECOND for the first field whose current value
        is not accepted. If that field can advance within its cycle the new
        value is committed; if it wraps, the borrow climbs toward YEAR until a
        field advances past its current value. Fields below the committed one
        are reset to their minimums. Returns None when the borrow runs past
        YEAR.

        The result never lies after the earliest match, so repeating the pass
        until the vector matches finds the next occurrence.
        """
        out = list(values)
        i = _YEAR
        borrow = False
        while i >= 0:
            if i == _WEEKDAY:
                if _matches_weekday(self._matchers[i], values[i]):
                    i -= 1
                    continue
                return self._shift_to_weekday(values)
            nxt = self._next_value(i, values, values[i])
            if nxt is None:
                borrow = True
                i += 1
                break
            if nxt > values[i]:
                out[i] = nxt
                break
            i -= 1

        if borrow:
            while i <= _YEAR:
                # the weekday follows from the date; it carries nothing upward
                if i == _WEEKDAY:
                    i += 1
                    continue
                nxt = self._next_value(i, values, values[i] + 1)
                if nxt is not None:
                    out[i] = nxt
                    break
                i += 1
            else:
                return None

        return self._reset(out, i - 1)

    def _next_value(self, ordinal: int, values: FieldValues, start: int) -> int | None:
        """Next accepted value >= start for one field, None on wraparound."""
        matcher = self._matchers[ordinal]
        if ordinal != _DAY:
            nxt = matcher.next_at_or_after(start)
            return nxt if nxt >= start else None
        year, month = values[_YEAR], values[_MONTH]
        if isinstance(matcher, DayOfMonthMatch):
            nxt = matcher.next_in_month(start, month, is_leap_year(year))
        else:
            nxt = matcher.next_at_or_after(start)
        if nxt < start or nxt > days_in_month(year, month):
            return None
        return nxt

    def _shift_to_weekday(self, values: FieldValues) -> FieldValues:
        """Move the date forward to the next accepted weekday, at its first time."""
        current = values[_WEEKDAY]
        nxt = self._matchers[_WEEKDAY].next_at_or_after(current)
        delta = (nxt - current) % 7 or 7
        d = date(values[_YEAR], values[_MONTH], values[_DAY]) + timedelta(days=delta)
        out = list(values)
        out[_DAY], out[_MONTH], out[_YEAR] = d.day, d.month, d.year
        return self._reset(out, _HOUR)

    def reset_to_min(self, values: Sequence[int], upto: FieldSpec) -> FieldValues:
        """Reset every field from SECOND through ``upto`` to its minimum.

        The weekday is never set directly; it is recomputed from the date. A
        day past the end of its month rolls to the first of the next month.
        """
        return self._reset(list(values), upto.ordinal)

    def _reset(self, values: list[int], upto: int) -> FieldValues:
        for i in range(_SECOND, upto + 1):
            if i == _WEEKDAY:
                continue
            values[i] = min_value(FieldSpec.of(i), self._matchers[i])
        if values[_DAY] > days_in_month(values[_YEAR], values[_MONTH]):
            values[_DAY] = 1
            values[_MONTH] += 1
            if values[_MONTH] > FieldSpec.MONTH.max:
                values[_MONTH] = FieldSpec.MONTH.min
                values[_YEAR] += 1
        return with_weekday(values)

    def __repr__(self) -> str:
        parts = ", ".join(f"{spec}={m!r}" for spec, m in zip(FieldSpec, self._matchers))
        return f"ScheduleMatcher({parts})"


def _matches_day_of_month(matcher: FieldMatcher, day: int, month: int, is_leap: bool) -> bool:
    if isinstance(matcher, DayOfMonthMatch):
        return matcher.matches(day, month, is_leap)
    return matcher.matches(day)


def _matches_weekday(matcher: FieldMatcher, weekday: int) -> bool:
    # 0 and 7 both mean Sunday
    return matcher.matches(weekday) or (weekday == 0 and matcher.matches(7))

