"""
Domain: month windows and month indexes.

Rules implemented here:
- A rule's validity window starts on the first calendar day of a month and ends
  on the last calendar day of the month five months later:
  - from 2025-01-01 → to 2025-06-30
  - from 2024-12-01 → to 2025-05-31
- The month index is the number of whole months elapsed between a fixed epoch
  and a target date:
  months = (years * 12 + months) of the calendar difference,
  minus one when the target's day-of-month is earlier than the epoch's.

This module contains only pure value objects: no I/O, no implicit 'now'.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

# Number of months after the start month that a window stays valid.
WINDOW_SPAN_MONTHS: int = 5


def add_months(day: date, months: int) -> date:
    """Shift to the first day of the month `months` away from `day`'s month."""

    total = day.year * 12 + (day.month - 1) + months
    return date(total // 12, total % 12 + 1, 1)


def last_day_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def months_between(start: date, end: date) -> int:
    """
    Whole months elapsed from `start` to `end`.

    Raises if `end` precedes `start`; a month index is never negative.
    """

    if end < start:
        raise ValueError("end must not precede start")

    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


@dataclass(frozen=True, slots=True)
class MonthWindow:
    """
    Validity window of one month's discount rule.

    One window per calendar month; recomputed on demand, never stored on its own.
    """

    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.start_date.day != 1:
            raise ValueError("start_date must be the first day of a month")
        expected = last_day_of_month(add_months(self.start_date, WINDOW_SPAN_MONTHS))
        if self.end_date != expected:
            raise ValueError(
                f"end_date must be {expected.isoformat()} for start_date {self.start_date.isoformat()}"
            )

    @classmethod
    def containing(cls, day: date) -> "MonthWindow":
        """Window whose start month is the calendar month of `day`."""

        start = day.replace(day=1)
        end = last_day_of_month(add_months(start, WINDOW_SPAN_MONTHS))
        return cls(start_date=start, end_date=end)

    @property
    def label(self) -> str:
        """Human-readable month name, e.g. 'January 2025'."""

        return f"{calendar.month_name[self.start_date.month]} {self.start_date.year}"

    def is_expired(self, today: date) -> bool:
        return self.end_date < today
