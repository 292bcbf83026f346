"""Calendar arithmetic for recurring due dates.

All reminder rules compare a due day against a :class:`CalendarDay` through
the helpers here, so the two known simplifications stay in one place:

* ``days_until_in_month`` only looks forward within the current month; a debt
  due on the 2nd is not "upcoming" on the 30th.
* ``matches_biweekly`` treats bi-weekly as two anchors per month (``due_day``
  and ``due_day + 15``) rather than a rolling 14-day cadence.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

UPCOMING_WINDOW_DAYS = 3
BIWEEKLY_OFFSET_DAYS = 15


@dataclass(frozen=True, slots=True)
class CalendarDay:
    """A date broken into the fields due-day rules care about."""

    day_of_month: int  # 1-31
    day_of_week: int  # 0=Sunday ... 6=Saturday
    days_in_month: int

    @classmethod
    def from_date(cls, value: date) -> "CalendarDay":
        return cls(
            day_of_month=value.day,
            day_of_week=value.isoweekday() % 7,
            days_in_month=calendar.monthrange(value.year, value.month)[1],
        )


def days_until_in_month(
    today: CalendarDay, due_day: int, *, window: int = UPCOMING_WINDOW_DAYS
) -> int | None:
    """Days until ``due_day`` if it falls within ``window`` days later this month."""

    if today.day_of_month < due_day <= today.day_of_month + window:
        return due_day - today.day_of_month
    return None


def matches_monthly(today: CalendarDay, due_day: int | None) -> bool:
    return due_day is not None and today.day_of_month == due_day


def matches_weekly(today: CalendarDay, due_weekday: int | None) -> bool:
    return due_weekday is not None and today.day_of_week == due_weekday


def matches_biweekly(today: CalendarDay, due_day: int | None) -> bool:
    """Match ``due_day`` and, when the month is long enough, ``due_day + 15``.

    A due day of 0 (a cleared form field) never matches.
    """

    if not due_day:
        return False
    if today.day_of_month == due_day:
        return True
    second = due_day + BIWEEKLY_OFFSET_DAYS
    return second <= today.days_in_month and today.day_of_month == second


__all__ = [
    "BIWEEKLY_OFFSET_DAYS",
    "CalendarDay",
    "UPCOMING_WINDOW_DAYS",
    "days_until_in_month",
    "matches_biweekly",
    "matches_monthly",
    "matches_weekly",
]
