"""nextmatch — find the next date matching a recurrence pattern."""

from __future__ import annotations

from nextmatch.domain.recurrence import (
    MONTH_SEARCH_LIMIT,
    YEAR_SEARCH_LIMIT,
    find_next_annual_date,
    find_next_day_of_month,
    find_next_weekday,
)
from nextmatch.domain.weekdays import Weekday

__version__ = "0.1.0"

__all__ = [
    "MONTH_SEARCH_LIMIT",
    "YEAR_SEARCH_LIMIT",
    "Weekday",
    "__version__",
    "find_next_annual_date",
    "find_next_day_of_month",
    "find_next_weekday",
]
