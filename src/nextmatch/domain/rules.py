"""Recurrence rules — a pattern plus the search that finds its next date.

A rule names one of the three patterns and carries exactly the targets that
pattern needs. Day and month ranges are not checked here: an out-of-range
target never matches, and the service layer reports it as invalid input.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from enum import StrEnum

from pydantic import BaseModel, model_validator

from nextmatch.domain.recurrence import (
    MONTH_SEARCH_LIMIT,
    YEAR_SEARCH_LIMIT,
    find_next_annual_date,
    find_next_day_of_month,
    find_next_weekday,
)
from nextmatch.domain.weekdays import Weekday


class RecurrenceKind(StrEnum):
    """Recurrence patterns."""

    WEEKDAY = "weekday"
    DAY_OF_MONTH = "day_of_month"
    ANNUAL = "annual"


REQUIRED_FIELDS: dict[str, frozenset[str]] = {
    "weekday": frozenset({"weekday"}),
    "day_of_month": frozenset({"day"}),
    "annual": frozenset({"month", "day"}),
}


class RecurrenceRule(BaseModel):
    """A recurrence pattern and its targets."""

    model_config = {"frozen": True}

    kind: RecurrenceKind
    weekday: Weekday | None = None
    day: int | None = None
    month: int | None = None

    @model_validator(mode="after")
    def _check_fields(self) -> RecurrenceRule:
        required = REQUIRED_FIELDS[self.kind]
        present = {name for name in ("weekday", "day", "month") if getattr(self, name) is not None}
        missing = required - present
        if missing:
            msg = f"{self.kind} rule requires {', '.join(sorted(missing))}"
            raise ValueError(msg)
        extra = present - required
        if extra:
            msg = f"{self.kind} rule does not accept {', '.join(sorted(extra))}"
            raise ValueError(msg)
        return self

    @classmethod
    def weekly(cls, weekday: Weekday) -> RecurrenceRule:
        return cls(kind=RecurrenceKind.WEEKDAY, weekday=weekday)

    @classmethod
    def monthly(cls, day: int) -> RecurrenceRule:
        return cls(kind=RecurrenceKind.DAY_OF_MONTH, day=day)

    @classmethod
    def annually(cls, month: int, day: int) -> RecurrenceRule:
        return cls(kind=RecurrenceKind.ANNUAL, month=month, day=day)


def next_occurrence(
    rule: RecurrenceRule,
    after: date,
    *,
    max_months: int = MONTH_SEARCH_LIMIT,
    max_years: int = YEAR_SEARCH_LIMIT,
) -> date | None:
    """Return the first date strictly after *after* matching *rule*, or None."""
    if rule.kind == RecurrenceKind.WEEKDAY:
        assert rule.weekday is not None
        return find_next_weekday(after, rule.weekday)
    if rule.kind == RecurrenceKind.DAY_OF_MONTH:
        assert rule.day is not None
        return find_next_day_of_month(after, rule.day, max_months=max_months)
    assert rule.month is not None and rule.day is not None
    return find_next_annual_date(after, rule.month, rule.day, max_years=max_years)


def iter_occurrences(
    rule: RecurrenceRule,
    after: date,
    *,
    max_months: int = MONTH_SEARCH_LIMIT,
    max_years: int = YEAR_SEARCH_LIMIT,
) -> Iterator[date]:
    """Yield successive occurrences of *rule* after *after*.

    Each search starts from the previous result. The iterator ends at the
    first search that finds nothing (invalid target or end of ``date`` range).
    """
    current = after
    while True:
        found = next_occurrence(rule, current, max_months=max_months, max_years=max_years)
        if found is None:
            return
        yield found
        current = found
