"""Tests for RecurrenceRule and rule-driven searches."""

from datetime import date
from itertools import islice

import pytest
from pydantic import ValidationError

from nextmatch.domain.rules import (
    RecurrenceKind,
    RecurrenceRule,
    iter_occurrences,
    next_occurrence,
)
from nextmatch.domain.weekdays import Weekday


class TestRecurrenceRule:
    def test_weekly(self) -> None:
        rule = RecurrenceRule.weekly(Weekday.FRIDAY)
        assert rule.kind == RecurrenceKind.WEEKDAY
        assert rule.weekday is Weekday.FRIDAY
        assert rule.day is None

    def test_monthly(self) -> None:
        rule = RecurrenceRule.monthly(15)
        assert rule.kind == RecurrenceKind.DAY_OF_MONTH
        assert rule.day == 15

    def test_annually(self) -> None:
        rule = RecurrenceRule.annually(2, 29)
        assert (rule.kind, rule.month, rule.day) == (RecurrenceKind.ANNUAL, 2, 29)

    def test_from_plain_values(self) -> None:
        rule = RecurrenceRule.model_validate({"kind": "weekday", "weekday": 2})
        assert rule.weekday is Weekday.WEDNESDAY

    @pytest.mark.parametrize(
        "payload",
        [
            {"kind": "weekday"},
            {"kind": "day_of_month"},
            {"kind": "annual", "day": 1},
            {"kind": "annual", "month": 1},
        ],
    )
    def test_missing_targets_rejected(self, payload: dict[str, object]) -> None:
        with pytest.raises(ValidationError, match="requires"):
            RecurrenceRule.model_validate(payload)

    @pytest.mark.parametrize(
        "payload",
        [
            {"kind": "weekday", "weekday": 0, "day": 3},
            {"kind": "day_of_month", "day": 3, "month": 4},
        ],
    )
    def test_extra_targets_rejected(self, payload: dict[str, object]) -> None:
        with pytest.raises(ValidationError, match="does not accept"):
            RecurrenceRule.model_validate(payload)

    def test_unknown_weekday_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RecurrenceRule.model_validate({"kind": "weekday", "weekday": 7})

    def test_out_of_range_day_accepted(self) -> None:
        """Range checks belong to the search, not the rule."""
        assert RecurrenceRule.monthly(40).day == 40

    def test_frozen(self) -> None:
        rule = RecurrenceRule.monthly(1)
        with pytest.raises(ValidationError):
            rule.day = 2  # type: ignore[misc]


class TestNextOccurrence:
    def test_weekday(self) -> None:
        rule = RecurrenceRule.weekly(Weekday.MONDAY)
        assert next_occurrence(rule, date(2023, 10, 15)) == date(2023, 10, 16)

    def test_day_of_month(self) -> None:
        rule = RecurrenceRule.monthly(31)
        assert next_occurrence(rule, date(2023, 1, 31)) == date(2023, 3, 31)

    def test_annual(self) -> None:
        rule = RecurrenceRule.annually(7, 1)
        assert next_occurrence(rule, date(2023, 8, 1)) == date(2024, 7, 1)

    def test_limits_are_forwarded(self) -> None:
        assert next_occurrence(RecurrenceRule.monthly(31), date(2023, 1, 31), max_months=1) is None
        assert next_occurrence(RecurrenceRule.annually(2, 29), date(2024, 3, 1), max_years=3) is None


class TestIterOccurrences:
    def test_monthly_31st_skips_short_months(self) -> None:
        rule = RecurrenceRule.monthly(31)
        got = list(islice(iter_occurrences(rule, date(2023, 1, 1)), 5))
        assert got == [
            date(2023, 1, 31),
            date(2023, 3, 31),
            date(2023, 5, 31),
            date(2023, 7, 31),
            date(2023, 8, 31),
        ]

    def test_leap_day_series(self) -> None:
        rule = RecurrenceRule.annually(2, 29)
        got = list(islice(iter_occurrences(rule, date(2023, 1, 1)), 3))
        assert got == [date(2024, 2, 29), date(2028, 2, 29), date(2032, 2, 29)]

    def test_weekly_series(self) -> None:
        rule = RecurrenceRule.weekly(Weekday.SUNDAY)
        got = list(islice(iter_occurrences(rule, date(2023, 10, 15)), 3))
        assert got == [date(2023, 10, 22), date(2023, 10, 29), date(2023, 11, 5)]

    def test_invalid_target_yields_nothing(self) -> None:
        assert list(iter_occurrences(RecurrenceRule.annually(13, 1), date(2023, 1, 1))) == []

    def test_stops_at_end_of_calendar(self) -> None:
        rule = RecurrenceRule.weekly(Weekday.MONDAY)
        got = list(iter_occurrences(rule, date(9999, 12, 10)))
        assert got == [date(9999, 12, 13), date(9999, 12, 20), date(9999, 12, 27)]
