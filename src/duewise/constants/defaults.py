"""
Default snapshot used on first run and whenever persisted data cannot be read.
"""

from __future__ import annotations

from ..models.snapshot import (
    Debt,
    Expense,
    ExpenseFrequency,
    FinancialState,
    HistoryPoint,
    Income,
)

# Profiles that can be recorded as the author of a payment
USER_PROFILES = ["Edna", "Ronaldo"]

DEFAULT_DEBT_COLOR = "#64748b"

EXPENSE_CATEGORIES = [
    "Services",
    "Food",
    "Nanny",
    "Housing",
    "Transport",
    "Health",
    "Other",
]

INITIAL_STATE = FinancialState(
    debts=(
        Debt(id="1", name="BBVA", initial_amount=50000, current_amount=45000, min_payment=2500,
             color="#1e40af", due_day=15, interest_rate=45),
        Debt(id="2", name="Plata Card", initial_amount=15000, current_amount=12000, min_payment=1000,
             color="#ec4899", due_day=5, interest_rate=65),
        Debt(id="3", name="Fovissste", initial_amount=800000, current_amount=750000, min_payment=5000,
             color="#f59e0b", due_day=28, interest_rate=11),
    ),
    expenses=(
        Expense(id="1", name="Electricity", amount=500, category="Services",
                frequency=ExpenseFrequency.MONTHLY, due_day=10),
        Expense(id="2", name="Internet", amount=600, category="Services",
                frequency=ExpenseFrequency.MONTHLY, due_day=5),
        # Weekly due days are weekdays: 1 = Monday
        Expense(id="3", name="Weekly groceries", amount=1000, category="Food",
                frequency=ExpenseFrequency.WEEKLY, due_day=1),
        Expense(id="4", name="Nanny", amount=1500, category="Nanny",
                frequency=ExpenseFrequency.BIWEEKLY, due_day=15),
    ),
    incomes=(
        Income(id="1", source="Edna", amount=18000),
        Income(id="2", source="Ronaldo", amount=20000),
    ),
    payments=(),
    history=(
        HistoryPoint(date="2023-10", total_debt=865000),
        HistoryPoint(date="2023-11", total_debt=855000),
        HistoryPoint(date="2023-12", total_debt=840000),
        HistoryPoint(date="2024-01", total_debt=825000),
        HistoryPoint(date="2024-02", total_debt=807000),
    ),
)
