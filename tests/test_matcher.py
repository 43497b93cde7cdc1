from __future__ import annotations

import pytest

from cronmatch import (
    AlwaysMatch,
    CronMatchError,
    DayOfMonthMatch,
    DiscreteSet,
    FieldSpec,
    min_value,
)


class TestAlwaysMatch:
    def test_matches_everything(self) -> None:
        m = AlwaysMatch(FieldSpec.SECOND)
        assert m.matches(0)
        assert m.matches(59)
        assert m.matches(99)

    def test_next_is_identity_within_range(self) -> None:
        m = AlwaysMatch(FieldSpec.MINUTE)
        assert m.next_at_or_after(0) == 0
        assert m.next_at_or_after(37) == 37
        assert m.next_at_or_after(59) == 59

    def test_next_wraps_past_range(self) -> None:
        m = AlwaysMatch(FieldSpec.MONTH)
        assert m.next_at_or_after(13) == 1

    def test_next_clamps_below_range(self) -> None:
        assert AlwaysMatch(FieldSpec.YEAR).next_at_or_after(1900) == 1970


class TestDiscreteSet:
    def test_membership(self) -> None:
        m = DiscreteSet.of(5, 10, 15)
        assert m.matches(10)
        assert not m.matches(11)

    def test_next_at_or_after(self) -> None:
        m = DiscreteSet.of(5, 10, 15)
        assert m.next_at_or_after(0) == 5
        assert m.next_at_or_after(5) == 5
        assert m.next_at_or_after(6) == 10
        assert m.next_at_or_after(15) == 15

    def test_wraparound_returns_smallest_member(self) -> None:
        m = DiscreteSet.of(5, 10, 15)
        nxt = m.next_at_or_after(20)
        assert nxt == 5
        assert nxt < 20

    def test_min_value_is_cached_smallest(self) -> None:
        assert DiscreteSet.of(40, 3, 17).min_value == 3

    def test_empty_set_rejected(self) -> None:
        with pytest.raises(CronMatchError) as exc:
            DiscreteSet(frozenset())
        assert exc.value.kind == "matcher"

    def test_for_field_validates_range(self) -> None:
        assert DiscreteSet.for_field(FieldSpec.HOUR, [0, 23]).matches(23)
        with pytest.raises(CronMatchError) as exc:
            DiscreteSet.for_field(FieldSpec.HOUR, [24])
        assert exc.value.kind == "matcher"
        assert exc.value.field == "hour"

    def test_equal_sets_compare_equal(self) -> None:
        assert DiscreteSet.of(1, 2) == DiscreteSet(frozenset({2, 1}))


class TestDayOfMonthMatch:
    def test_feb_29_only_in_leap_years(self) -> None:
        m = DayOfMonthMatch.of(29)
        assert m.matches(29, 2, True)
        assert not m.matches(29, 2, False)

    def test_day_past_month_end_never_matches(self) -> None:
        m = DayOfMonthMatch.of(31)
        assert not m.matches(31, 4, False)
        assert m.matches(31, 5, False)

    def test_last_day_follows_month_length(self) -> None:
        m = DayOfMonthMatch.of(last_day=True)
        assert m.matches(30, 4, False)
        assert m.matches(31, 1, False)
        assert m.matches(28, 2, False)
        assert not m.matches(28, 2, True)
        assert m.matches(29, 2, True)
        assert not m.matches(30, 5, False)

    def test_single_argument_match_treats_last_day_as_31(self) -> None:
        m = DayOfMonthMatch.of(1, 15, last_day=True)
        assert m.matches(15)
        assert m.matches(31)
        assert not m.matches(30)
        assert not DayOfMonthMatch.of(15).matches(31)

    def test_next_at_or_after_result_is_accepted(self) -> None:
        m = DayOfMonthMatch.of(5, last_day=True)
        for value in range(1, 33):
            assert m.matches(m.next_at_or_after(value))

    def test_next_in_month_respects_length(self) -> None:
        m = DayOfMonthMatch.of(10, 31)
        assert m.next_in_month(11, 1, False) == 31
        # April has no 31st: wraps to the 10th
        assert m.next_in_month(11, 4, False) == 10

    def test_next_in_month_with_last_day(self) -> None:
        m = DayOfMonthMatch.of(5, last_day=True)
        assert m.next_in_month(6, 2, False) == 28
        assert m.next_in_month(6, 2, True) == 29
        assert m.next_in_month(6, 4, False) == 30

    def test_next_in_month_with_no_day_in_month(self) -> None:
        m = DayOfMonthMatch.of(31)
        assert m.next_in_month(1, 2, False) == 31

    def test_nominal_next_treats_last_as_31(self) -> None:
        m = DayOfMonthMatch.of(5, last_day=True)
        assert m.next_at_or_after(6) == 31
        assert m.next_at_or_after(32) == 5

    def test_must_accept_something(self) -> None:
        with pytest.raises(CronMatchError) as exc:
            DayOfMonthMatch(frozenset())
        assert exc.value.kind == "matcher"

    def test_rejects_out_of_range_day(self) -> None:
        with pytest.raises(CronMatchError):
            DayOfMonthMatch.of(32)


class TestMinValue:
    def test_always_match_uses_field_minimum(self) -> None:
        assert min_value(FieldSpec.DAY_OF_MONTH, AlwaysMatch(FieldSpec.DAY_OF_MONTH)) == 1
        assert min_value(FieldSpec.YEAR, AlwaysMatch(FieldSpec.YEAR)) == 1970

    def test_discrete_set_uses_smallest_member(self) -> None:
        assert min_value(FieldSpec.MINUTE, DiscreteSet.of(45, 15)) == 15

    def test_day_of_month_uses_field_floor(self) -> None:
        assert min_value(FieldSpec.DAY_OF_MONTH, DayOfMonthMatch.of(20)) == 1

    def test_unknown_matcher_is_a_configuration_error(self) -> None:
        class Odd:
            def matches(self, value: int) -> bool:
                return True

            def next_at_or_after(self, value: int) -> int:
                return value

        with pytest.raises(CronMatchError) as exc:
            min_value(FieldSpec.SECOND, Odd())  # type: ignore[arg-type]
        assert exc.value.kind == "pattern"
        assert "Odd" in str(exc.value)
