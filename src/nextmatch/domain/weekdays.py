"""Day-of-week enumeration.

Values follow ``date.weekday()``: Monday is 0, Sunday is 6.
"""

from __future__ import annotations

from datetime import date
from enum import IntEnum


class Weekday(IntEnum):
    """The seven days of the week."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, value: date) -> Weekday:
        """Return the weekday *value* falls on."""
        return cls(value.weekday())
