"""RecurrenceService — next-occurrence lookups with classified failures.

The domain searches collapse every failure into ``None``. This service runs
the same searches and, when one comes back empty, works out why:

- ``INVALID_INPUT``: the target can never match (day 32, month 13, Feb 30).
- ``OVERFLOW``: the scan window runs past the last representable date.
- ``SEARCH_EXHAUSTED``: the target is valid but no match fell in the window.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import date
from itertools import islice
from typing import Any

from pydantic import ValidationError

from nextmatch.config.models import SearchConfig
from nextmatch.config.settings import NextMatchSettings
from nextmatch.domain.recurrence import is_valid_day_of_month, is_valid_month_day
from nextmatch.domain.rules import RecurrenceKind, RecurrenceRule, iter_occurrences
from nextmatch.domain.weekdays import Weekday
from nextmatch.services.result import (
    INVALID_INPUT,
    OVERFLOW,
    SEARCH_EXHAUSTED,
    ServiceError,
    ServiceResult,
)

logger = logging.getLogger(__name__)

_LAST_MONTH_INDEX = date.max.year * 12 + date.max.month - 1


def _date_payload(value: date) -> dict[str, Any]:
    return {"date": value.isoformat(), "weekday": Weekday.of(value).name.lower()}


def _first_error(exc: ValidationError) -> str:
    return exc.errors()[0]["msg"]


class RecurrenceService:
    """Finds next occurrences using the configured scan windows.

    Usage::

        service = RecurrenceService()
        result = service.next_day_of_month(date(2023, 1, 31), 31)
        result.data["date"]  # "2023-03-31"

    Without an explicit *search* section the windows come from
    :class:`NextMatchSettings`, so ``NEXTMATCH_SEARCH__*`` env vars and
    ``nextmatch.toml`` apply.
    """

    def __init__(self, search: SearchConfig | None = None) -> None:
        self._search = search if search is not None else NextMatchSettings().search

    @classmethod
    def from_settings(cls, settings: NextMatchSettings) -> RecurrenceService:
        return cls(settings.search)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def next_weekday(self, current_date: date, weekday: int) -> ServiceResult:
        """Next date after *current_date* on *weekday* (0 = Monday)."""
        try:
            target = Weekday(weekday)
        except ValueError:
            return self._invalid("next_weekday", f"Unknown weekday: {weekday!r}", weekday=weekday)
        return self._next("next_weekday", RecurrenceRule.weekly(target), current_date)

    def next_day_of_month(self, current_date: date, day: int) -> ServiceResult:
        """Next date after *current_date* whose day of month is *day*."""
        op = "next_day_of_month"
        try:
            rule = RecurrenceRule.monthly(day)
        except ValidationError as exc:
            return self._invalid(op, f"Invalid day of month {day!r}: {_first_error(exc)}", day=day)
        return self._next(op, rule, current_date)

    def next_annual_date(self, current_date: date, month: int, day: int) -> ServiceResult:
        """Next date after *current_date* falling on *month*/*day*."""
        op = "next_annual_date"
        try:
            rule = RecurrenceRule.annually(month, day)
        except ValidationError as exc:
            return self._invalid(
                op,
                f"Invalid month/day {month!r}/{day!r}: {_first_error(exc)}",
                month=month,
                day=day,
            )
        return self._next(op, rule, current_date)

    def next_occurrence(self, rule: RecurrenceRule, after: date) -> ServiceResult:
        """Next date after *after* matching *rule*."""
        return self._next("next_occurrence", rule, after)

    def upcoming(self, rule: RecurrenceRule, after: date, count: int) -> ServiceResult:
        """Up to *count* successive occurrences of *rule* after *after*."""
        op = "upcoming"
        if count < 1:
            return self._invalid(op, f"Count must be at least 1, got {count}", count=count)
        error = self._check_targets(rule)
        if error is not None:
            return ServiceResult(ok=False, op=op, error=error)

        dates = list(islice(self._iter(rule, after), count))
        if not dates:
            return ServiceResult(ok=False, op=op, error=self._classify_miss(rule, after))

        warnings: list[str] = []
        if len(dates) < count:
            stop = self._classify_miss(rule, dates[-1])
            warnings.append(f"Only {len(dates)} of {count} occurrences found: {stop.message}")
        return ServiceResult(
            ok=True,
            op=op,
            data={"dates": [d.isoformat() for d in dates], "count": len(dates)},
            warnings=warnings,
            meta=self._meta(rule),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _iter(self, rule: RecurrenceRule, after: date) -> Iterator[date]:
        return iter_occurrences(
            rule,
            after,
            max_months=self._search.max_months_ahead,
            max_years=self._search.max_years_ahead,
        )

    def _next(self, op: str, rule: RecurrenceRule, after: date) -> ServiceResult:
        error = self._check_targets(rule)
        if error is None:
            found = next(self._iter(rule, after), None)
            if found is not None:
                return ServiceResult(
                    ok=True, op=op, data=_date_payload(found), meta=self._meta(rule)
                )
            error = self._classify_miss(rule, after)
        logger.debug("%s found no match after %s: %s", op, after, error.code)
        return ServiceResult(ok=False, op=op, error=error)

    def _invalid(self, op: str, message: str, **detail: Any) -> ServiceResult:
        logger.debug("%s rejected input: %s", op, message)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=INVALID_INPUT, message=message, detail=detail),
        )

    def _check_targets(self, rule: RecurrenceRule) -> ServiceError | None:
        if rule.kind == RecurrenceKind.DAY_OF_MONTH:
            assert rule.day is not None
            if not is_valid_day_of_month(rule.day):
                return ServiceError(
                    code=INVALID_INPUT,
                    message=f"Day of month must be between 1 and 31, got {rule.day}",
                    detail={"day": rule.day},
                )
        elif rule.kind == RecurrenceKind.ANNUAL:
            assert rule.month is not None and rule.day is not None
            if not is_valid_month_day(rule.month, rule.day):
                return ServiceError(
                    code=INVALID_INPUT,
                    message=f"No calendar date has month {rule.month} and day {rule.day}",
                    detail={"month": rule.month, "day": rule.day},
                )
        return None

    def _classify_miss(self, rule: RecurrenceRule, after: date) -> ServiceError:
        """Tell an exhausted window from one that runs off the end of the calendar."""
        if rule.kind == RecurrenceKind.WEEKDAY:
            overflow = True
        elif rule.kind == RecurrenceKind.DAY_OF_MONTH:
            month_index = after.year * 12 + after.month - 1
            overflow = month_index + self._search.max_months_ahead > _LAST_MONTH_INDEX
        else:
            overflow = after.year + self._search.max_years_ahead > date.max.year

        detail = {
            "after": after.isoformat(),
            "rule": rule.model_dump(mode="json", exclude_none=True),
        }
        if overflow:
            return ServiceError(
                code=OVERFLOW,
                message=f"Search after {after} runs past {date.max}",
                detail=detail,
            )
        return ServiceError(
            code=SEARCH_EXHAUSTED,
            message=f"No {rule.kind} match within the search window after {after}",
            detail=detail,
        )

    def _meta(self, rule: RecurrenceRule) -> dict[str, Any]:
        if rule.kind == RecurrenceKind.DAY_OF_MONTH:
            return {"max_months_ahead": self._search.max_months_ahead}
        if rule.kind == RecurrenceKind.ANNUAL:
            return {"max_years_ahead": self._search.max_years_ahead}
        return {}
