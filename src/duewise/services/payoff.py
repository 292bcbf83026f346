"""Debt payoff horizon calculator.

Computes how many monthly payments retire a balance when only the minimum
payment is made, using the closed-form amortization "number of periods"
formula with monthly compounding::

    r = annual_rate / 100 / 12
    n = ln(payment / (payment - balance * r)) / ln(1 + r)

A payment that does not exceed the interest accrued each month never reduces
the balance; that outcome is the :class:`Unpayable` horizon rather than a
float infinity so that comparison and serialization stay explicit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from ..models.snapshot import Debt


@dataclass(frozen=True, slots=True)
class Finite:
    """Payoff reached after ``months`` periods (fractional months allowed)."""

    months: float

    @property
    def is_paid_off(self) -> bool:
        return self.months == 0

    def to_dict(self) -> dict:
        return {"kind": "finite", "months": self.months}


@dataclass(frozen=True, slots=True)
class Unpayable:
    """The minimum payment never outpaces accruing interest."""

    def to_dict(self) -> dict:
        return {"kind": "unpayable"}


Horizon = Union[Finite, Unpayable]
UNPAYABLE = Unpayable()


@dataclass(frozen=True, slots=True)
class PayoffResult:
    """Payoff horizon computed for a single debt."""

    debt: Debt
    horizon: Horizon

    @property
    def debt_id(self) -> str:
        return self.debt.id

    def to_dict(self) -> dict:
        return {"debtId": self.debt.id, "horizon": self.horizon.to_dict()}


def monthly_rate(annual_interest_rate: float | None) -> float:
    """Convert an annual nominal percentage into a monthly decimal rate."""

    return (annual_interest_rate or 0.0) / 100.0 / 12.0


def calculate_payoff(
    current_amount: float,
    min_payment: float,
    annual_interest_rate: float | None = None,
) -> Horizon:
    """Return the payoff horizon for a balance paid at ``min_payment`` per month.

    Inputs are assumed validated (finite, non-negative); sanitizing them is
    the caller's job.
    """

    if current_amount <= 0:
        return Finite(0.0)
    if min_payment <= 0:
        return UNPAYABLE

    rate = monthly_rate(annual_interest_rate)
    if rate == 0:
        return Finite(current_amount / min_payment)

    accrued = current_amount * rate
    if min_payment <= accrued:
        return UNPAYABLE

    months = math.log(min_payment / (min_payment - accrued)) / math.log1p(rate)
    return Finite(months)


def project_debt(debt: Debt) -> PayoffResult:
    """Compute the payoff result for a snapshot debt."""

    return PayoffResult(
        debt=debt,
        horizon=calculate_payoff(debt.current_amount, debt.min_payment, debt.interest_rate),
    )


def describe_horizon(horizon: Horizon) -> str:
    """Render a horizon as years and months for display.

    Years are ``floor(months / 12)`` and the remainder is rounded up to whole
    months, so 30.5 months reads "2 years 7 months".
    """

    if isinstance(horizon, Unpayable):
        return "Never (interest exceeds payment)"
    if horizon.months == 0:
        return "Paid off"

    years = math.floor(horizon.months / 12)
    months = math.ceil(horizon.months % 12)
    month_label = f"{months} month{'s' if months != 1 else ''}"
    if years > 0:
        return f"{years} year{'s' if years > 1 else ''} {month_label}"
    return month_label


__all__ = [
    "Finite",
    "Horizon",
    "PayoffResult",
    "UNPAYABLE",
    "Unpayable",
    "calculate_payoff",
    "describe_horizon",
    "monthly_rate",
    "project_debt",
]
