from __future__ import annotations

from enum import Enum

from ._error import CronMatchError


class FieldSpec(Enum):
    """The seven schedule fields, in carry order.

    The ordinal is the index into a field vector. It is not a statement about
    calendar significance: DAY_OF_WEEK sits between MONTH and YEAR.
    """

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY_OF_MONTH = "day_of_month"
    MONTH = "month"
    DAY_OF_WEEK = "day_of_week"
    YEAR = "year"

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]

    @property
    def min(self) -> int:
        return _RANGES[self][0]

    @property
    def max(self) -> int:
        return _RANGES[self][1]

    @property
    def calendar_unit(self) -> str:
        """Name of the calendar attribute this field maps to."""
        return _CALENDAR_UNITS[self]

    @classmethod
    def of(cls, ordinal: int) -> FieldSpec:
        if not isinstance(ordinal, int) or not 0 <= ordinal < len(_BY_ORDINAL):
            raise CronMatchError.field_value(f"invalid field ordinal: {ordinal!r}")
        return _BY_ORDINAL[ordinal]

    def check(self, value: int) -> int:
        if not self.min <= value <= self.max:
            raise CronMatchError.field_value(
                f"value {value} out of range {self.min}-{self.max}", self.value
            )
        return value

    def __str__(self) -> str:
        return self.value


_BY_ORDINAL: tuple[FieldSpec, ...] = tuple(FieldSpec)

_ORDINALS = {f: i for i, f in enumerate(_BY_ORDINAL)}

# 0 and 7 are both Sunday
_RANGES = {
    FieldSpec.SECOND: (0, 59),
    FieldSpec.MINUTE: (0, 59),
    FieldSpec.HOUR: (0, 23),
    FieldSpec.DAY_OF_MONTH: (1, 31),
    FieldSpec.MONTH: (1, 12),
    FieldSpec.DAY_OF_WEEK: (0, 7),
    FieldSpec.YEAR: (1970, 2099),
}

_CALENDAR_UNITS = {
    FieldSpec.SECOND: "second",
    FieldSpec.MINUTE: "minute",
    FieldSpec.HOUR: "hour",
    FieldSpec.DAY_OF_MONTH: "day",
    FieldSpec.MONTH: "month",
    FieldSpec.DAY_OF_WEEK: "weekday",
    FieldSpec.YEAR: "year",
}

