"""Financial snapshot entities.

The snapshot is the single value the rest of the package reads. Every model is
frozen; changes go through :mod:`duewise.services.state_store`, which builds a
new snapshot instead of editing one in place. JSON uses the camelCase field
names the persisted payload has always used.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ExpenseFrequency(str, Enum):
    """Supported cadences for fixed expenses."""

    MONTHLY = "Monthly"
    WEEKLY = "Weekly"
    BIWEEKLY = "Bi-weekly"


class SnapshotModel(BaseModel):
    """Base for snapshot entities: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict:
        """Return a JSON-ready dict using wire (camelCase) names."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Debt(SnapshotModel):
    """A debt whose balance shrinks as payments are recorded."""

    id: str
    name: str
    initial_amount: float = 0.0
    current_amount: float = 0.0
    min_payment: float = 0.0
    color: str = "#64748b"
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    interest_rate: Optional[float] = None  # annual nominal percent

    @field_validator("due_day", mode="before")
    @classmethod
    def _blank_due_day(cls, value):
        # A cleared due-day field is stored as 0; treat it as unset.
        return value or None

    @property
    def progress_percent(self) -> float:
        """Share of the original amount already paid off, 0-100."""

        if self.initial_amount <= 0:
            return 0.0
        return (self.initial_amount - self.current_amount) / self.initial_amount * 100


class Payment(SnapshotModel):
    """Append-only record of money paid toward a debt."""

    id: str
    debt_id: str
    amount: float
    date: str  # ISO date, YYYY-MM-DD
    recorded_by: str


class Expense(SnapshotModel):
    """Recurring fixed expense.

    ``due_day`` is a day of the month for monthly and bi-weekly expenses and a
    day of the week (0=Sunday ... 6=Saturday) for weekly ones.
    """

    id: str
    name: str
    amount: float = 0.0
    category: str = "Other"
    frequency: Optional[ExpenseFrequency] = None
    due_day: Optional[int] = Field(default=None, ge=0, le=31)

    @property
    def effective_frequency(self) -> ExpenseFrequency:
        """Frequency with the historical default (monthly) applied."""

        return self.frequency or ExpenseFrequency.MONTHLY


class Income(SnapshotModel):
    id: str
    source: str
    amount: float = 0.0


class HistoryPoint(SnapshotModel):
    date: str  # YYYY-MM for month rollups, YYYY-MM-DD for payment-day points
    total_debt: float


class FinancialState(SnapshotModel):
    """Complete persisted state of the tracker."""

    debts: tuple[Debt, ...] = ()
    expenses: tuple[Expense, ...] = ()
    incomes: tuple[Income, ...] = ()
    payments: tuple[Payment, ...] = ()
    history: tuple[HistoryPoint, ...] = ()

    def find_debt(self, debt_id: str) -> Debt | None:
        """Return the debt with *debt_id*, if present."""

        for debt in self.debts:
            if debt.id == debt_id:
                return debt
        return None

    def payments_for(self, debt_id: str) -> tuple[Payment, ...]:
        """Payments toward *debt_id*, newest first."""

        return tuple(
            sorted(
                (p for p in self.payments if p.debt_id == debt_id),
                key=lambda p: p.date,
                reverse=True,
            )
        )

    @property
    def total_debt(self) -> float:
        return sum(debt.current_amount for debt in self.debts)


__all__ = [
    "Debt",
    "Expense",
    "ExpenseFrequency",
    "FinancialState",
    "HistoryPoint",
    "Income",
    "Payment",
    "SnapshotModel",
]
