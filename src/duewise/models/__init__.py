"""Model exports."""

from .settings import AppSetting
from .snapshot import (
    Debt,
    Expense,
    ExpenseFrequency,
    FinancialState,
    HistoryPoint,
    Income,
    Payment,
)

__all__ = [
    "AppSetting",
    "Debt",
    "Expense",
    "ExpenseFrequency",
    "FinancialState",
    "HistoryPoint",
    "Income",
    "Payment",
]
