from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable
from dataclasses import dataclass, field

from ._calendar import last_day_of_month
from ._error import CronMatchError
from ._field import FieldSpec

# Matchers answer two questions about a single field value:
#
#   matches(value)           -- is the value accepted?
#   next_at_or_after(value)  -- smallest accepted value >= value, or, when the
#                               field's cycle has no such value left, the
#                               smallest accepted value overall. A result
#                               smaller than the query means "wrapped around";
#                               the caller must borrow from the next field up.


def _next_in(ordered: tuple[int, ...], value: int) -> int:
    idx = bisect_left(ordered, value)
    if idx < len(ordered):
        return ordered[idx]
    return ordered[0]


@dataclass(frozen=True, slots=True)
class AlwaysMatch:
    spec: FieldSpec

    def matches(self, value: int) -> bool:
        return True

    def next_at_or_after(self, value: int) -> int:
        if value > self.spec.max:
            return self.spec.min
        return max(value, self.spec.min)


@dataclass(frozen=True, slots=True)
class DiscreteSet:
    values: frozenset[int]
    min_value: int = field(init=False, repr=False, compare=False)
    _ordered: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        values = frozenset(self.values)
        if not values:
            raise CronMatchError.matcher("matcher must accept at least one value")
        ordered = tuple(sorted(values))
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "_ordered", ordered)
        object.__setattr__(self, "min_value", ordered[0])

    @classmethod
    def of(cls, *values: int) -> DiscreteSet:
        return cls(frozenset(values))

    @classmethod
    def for_field(cls, spec: FieldSpec, values: Iterable[int]) -> DiscreteSet:
        matcher = cls(frozenset(values))
        check_range(spec, matcher)
        return matcher

    def matches(self, value: int) -> bool:
        return value in self.values

    def next_at_or_after(self, value: int) -> int:
        return _next_in(self._ordered, value)


@dataclass(frozen=True, slots=True)
class DayOfMonthMatch:
    """Day-of-month matcher that knows month lengths.

    ``last_day`` accepts the final day of whichever month is being checked
    (28, 29, 30 or 31), so one rule covers "last day of month" across the
    year, including February in leap years.
    """

    days: frozenset[int]
    last_day: bool = False
    _ordered: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        days = frozenset(self.days)
        if not days and not self.last_day:
            raise CronMatchError.matcher(
                "day-of-month matcher must accept at least one day", "day_of_month"
            )
        spec = FieldSpec.DAY_OF_MONTH
        for d in days:
            if not spec.min <= d <= spec.max:
                raise CronMatchError.matcher(
                    f"day {d} out of range {spec.min}-{spec.max}", spec.value
                )
        nominal = set(days)
        if self.last_day:
            nominal.add(spec.max)
        object.__setattr__(self, "days", days)
        object.__setattr__(self, "_ordered", tuple(sorted(nominal)))

    @classmethod
    def of(cls, *days: int, last_day: bool = False) -> DayOfMonthMatch:
        return cls(frozenset(days), last_day)

    def matches(self, value: int, month: int | None = None, is_leap: bool = False) -> bool:
        """Whether ``value`` is accepted.

        Without a month the nominal view applies, the same one
        next_at_or_after uses: ``last_day`` counts as day 31.
        """
        if month is None:
            return value in self._ordered
        last = last_day_of_month(month, is_leap)
        if value > last:
            return False
        return value in self.days or (self.last_day and value == last)

    def next_at_or_after(self, value: int) -> int:
        return _next_in(self._ordered, value)

    def next_in_month(self, value: int, month: int, is_leap: bool) -> int:
        """Like next_at_or_after, but only over days that exist in ``month``.

        When the month holds no accepted day at all, the nominal smallest day
        is returned; it lies past the month end, which callers treat as
        wraparound.
        """
        last = last_day_of_month(month, is_leap)
        in_month = {d for d in self.days if d <= last}
        if self.last_day:
            in_month.add(last)
        if not in_month:
            return self._ordered[0]
        return _next_in(tuple(sorted(in_month)), value)


FieldMatcher = AlwaysMatch | DiscreteSet | DayOfMonthMatch


def min_value(spec: FieldSpec, matcher: FieldMatcher) -> int:
    """Value a field is reset to once a higher field has advanced."""
    match matcher:
        case AlwaysMatch() | DayOfMonthMatch():
            return spec.min
        case DiscreteSet(min_value=smallest):
            return smallest
    raise CronMatchError.pattern(f"invalid matcher: {type(matcher).__name__}")


def check_range(spec: FieldSpec, matcher: FieldMatcher) -> None:
    """Reject explicit members that the field can never hold."""
    match matcher:
        case DiscreteSet(values=members) | DayOfMonthMatch(days=members):
            for v in sorted(members):
                if not spec.min <= v <= spec.max:
                    raise CronMatchError.matcher(
                        f"value {v} out of range {spec.min}-{spec.max}", spec.value
                    )
