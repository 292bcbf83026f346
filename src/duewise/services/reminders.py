"""Reminder feed derived from the snapshot and a calendar date.

``compute_reminders`` is a pure function of ``(state, today)``: it reads no
clock and keeps no memory of previous calls, so recomputing on every snapshot
change and on a timer always yields the same items for the same inputs. Item
ids are built from the rule and the debt/expense id only, which lets
consumers de-duplicate reminders across recomputations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Iterator

from ..logging_config import get_logger
from ..models.snapshot import Debt, Expense, ExpenseFrequency, FinancialState
from .due_dates import (
    CalendarDay,
    days_until_in_month,
    matches_biweekly,
    matches_monthly,
    matches_weekly,
)

logger = get_logger("reminders")

CHECKIN_LAST_DAY = 3
CHECKIN_ID = "monthly-checkin"


class ReminderKind(str, Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class ReminderItem:
    """A single entry in the reminder feed."""

    id: str
    kind: ReminderKind
    title: str
    message: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "message": self.message,
        }


def _checkin_reminders(today: CalendarDay) -> Iterator[ReminderItem]:
    if today.day_of_month <= CHECKIN_LAST_DAY:
        yield ReminderItem(
            id=CHECKIN_ID,
            kind=ReminderKind.INFO,
            title="Start of month",
            message="Time to record this month's income so the budget stays current.",
        )


def _debt_reminders(today: CalendarDay, debts: Iterable[Debt]) -> Iterator[ReminderItem]:
    for debt in debts:
        if debt.current_amount <= 0 or not debt.due_day:
            continue

        if matches_monthly(today, debt.due_day):
            yield ReminderItem(
                id=f"debt-due-{debt.id}",
                kind=ReminderKind.WARNING,
                title="Due today!",
                message=f"The minimum payment for {debt.name} is due today. Avoid late fees.",
            )
            continue

        days_left = days_until_in_month(today, debt.due_day)
        if days_left is not None:
            yield ReminderItem(
                id=f"debt-upcoming-{debt.id}",
                kind=ReminderKind.INFO,
                title="Upcoming payment",
                message=(
                    f"The payment for {debt.name} is due in "
                    f"{days_left} day{'s' if days_left != 1 else ''}."
                ),
            )


def _expense_message(today: CalendarDay, expense: Expense) -> str | None:
    """Return the reminder text if *expense* falls due today, else ``None``."""

    frequency = expense.effective_frequency
    if frequency is ExpenseFrequency.MONTHLY and matches_monthly(today, expense.due_day):
        return f"Today you pay or set aside: {expense.name}."
    if frequency is ExpenseFrequency.WEEKLY and matches_weekly(today, expense.due_day):
        return f"Weekly: today is the {expense.name} expense."
    if frequency is ExpenseFrequency.BIWEEKLY and matches_biweekly(today, expense.due_day):
        return f"Bi-weekly: today is the {expense.name} expense."
    return None


def _expense_reminders(
    today: CalendarDay, expenses: Iterable[Expense]
) -> Iterator[ReminderItem]:
    for expense in expenses:
        message = _expense_message(today, expense)
        if message is not None:
            yield ReminderItem(
                id=f"expense-{expense.id}",
                kind=ReminderKind.INFO,
                title="Fixed expense",
                message=message,
            )


def compute_reminders(state: FinancialState, today: date) -> tuple[ReminderItem, ...]:
    """Return the active reminders for *today*.

    Order: the start-of-month check-in, then debts, then expenses, each in
    snapshot order.
    """

    day = CalendarDay.from_date(today)
    items = (
        *_checkin_reminders(day),
        *_debt_reminders(day, state.debts),
        *_expense_reminders(day, state.expenses),
    )
    logger.debug(
        "Reminders computed",
        extra={"date": today.isoformat(), "count": len(items)},
    )
    return items


__all__ = ["CHECKIN_ID", "ReminderItem", "ReminderKind", "compute_reminders"]
