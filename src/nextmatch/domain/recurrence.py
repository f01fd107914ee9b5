"""Next-occurrence searches over calendar dates.

Three independent searches, each returning the first matching date strictly
after the starting date, or ``None`` when no match exists:

- weekday: at most 7 days ahead, no scan needed.
- day of month: month-by-month scan, bounded by ``MONTH_SEARCH_LIMIT``.
- annual month/day: year-by-year scan, bounded by ``YEAR_SEARCH_LIMIT``.

``None`` covers invalid targets, an exhausted scan window, and arithmetic
that leaves the ``date`` range alike. Callers that need to tell these apart
use :class:`nextmatch.services.recurrence.RecurrenceService`.

INVARIANT: inputs are never mutated; every result is a new ``date``.
"""

from __future__ import annotations

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from nextmatch.domain.weekdays import Weekday

# --- Scan limits (policy, not derived from the calendar) ---

MONTH_SEARCH_LIMIT = 12  # months scanned for a day-of-month match
YEAR_SEARCH_LIMIT = 8  # years scanned for an annual match; covers the 4-year leap gap

MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31

# Any leap year works; it makes February 29 a valid month/day pair.
_LEAP_REFERENCE_YEAR = 2000


def is_valid_day_of_month(day: int) -> bool:
    """Check whether *day* can occur as a day of month in any month."""
    return MIN_DAY_OF_MONTH <= day <= MAX_DAY_OF_MONTH


def is_valid_month_day(month: int, day: int) -> bool:
    """Check whether (*month*, *day*) occurs in at least one year.

    Examples:
        >>> is_valid_month_day(2, 29)
        True
        >>> is_valid_month_day(2, 30)
        False
        >>> is_valid_month_day(13, 1)
        False
    """
    try:
        date(_LEAP_REFERENCE_YEAR, month, day)
    except (ValueError, OverflowError):
        return False
    return True


def find_next_weekday(current_date: date, target_weekday: Weekday) -> date | None:
    """Return the next date after *current_date* falling on *target_weekday*.

    When *current_date* is already on *target_weekday* the result is one week
    later, never the same day. Returns None only if the result would fall
    past ``date.max``.

    Examples:
        >>> find_next_weekday(date(2023, 10, 15), Weekday.MONDAY)
        datetime.date(2023, 10, 16)
        >>> find_next_weekday(date(2023, 10, 16), Weekday.MONDAY)
        datetime.date(2023, 10, 23)
    """
    target = Weekday(target_weekday)
    delta = (target - current_date.weekday() + 6) % 7 + 1
    try:
        return current_date + timedelta(days=delta)
    except OverflowError:
        return None


def find_next_day_of_month(
    current_date: date,
    target_day: int,
    *,
    max_months: int = MONTH_SEARCH_LIMIT,
) -> date | None:
    """Return the next date after *current_date* whose day of month is *target_day*.

    The current month is used when *target_day* is still ahead and the month
    is long enough. Otherwise the following *max_months* months are scanned,
    skipping any month too short for *target_day*.

    Examples:
        >>> find_next_day_of_month(date(2023, 10, 15), 20)
        datetime.date(2023, 10, 20)
        >>> find_next_day_of_month(date(2023, 1, 31), 31)
        datetime.date(2023, 3, 31)
    """
    if current_date.day < target_day:
        try:
            return current_date.replace(day=target_day)
        except (ValueError, OverflowError):
            pass

    for offset in range(1, max_months + 1):
        try:
            # relativedelta clamps to month end, so Jan 31 + 1 month is Feb 28.
            return (current_date + relativedelta(months=offset)).replace(day=target_day)
        except (ValueError, OverflowError):
            continue
    return None


def find_next_annual_date(
    current_date: date,
    target_month: int,
    target_day: int,
    *,
    max_years: int = YEAR_SEARCH_LIMIT,
) -> date | None:
    """Return the next date after *current_date* with the given month and day.

    This year's candidate wins if it is valid and still ahead. Otherwise the
    first valid candidate among the next *max_years* years is returned; any
    later year is necessarily after *current_date*. February 29 therefore
    lands on the next leap year.

    Examples:
        >>> find_next_annual_date(date(2023, 5, 15), 6, 20)
        datetime.date(2023, 6, 20)
        >>> find_next_annual_date(date(2023, 8, 1), 7, 1)
        datetime.date(2024, 7, 1)
        >>> find_next_annual_date(date(2024, 3, 20), 2, 29)
        datetime.date(2028, 2, 29)
    """
    year = current_date.year

    try:
        candidate = date(year, target_month, target_day)
    except (ValueError, OverflowError):
        candidate = None
    if candidate is not None and candidate > current_date:
        return candidate

    for offset in range(1, max_years + 1):
        try:
            return date(year + offset, target_month, target_day)
        except (ValueError, OverflowError):
            continue
    return None
