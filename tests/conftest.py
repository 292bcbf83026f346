"""Pytest configuration and shared fixtures for DueWise tests.

This module provides database fixtures, snapshot factories, and helper
utilities for testing the payoff engine, the reminder feed, and the snapshot
store without touching the real application database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from duewise.infra.database import create_session_factory
from duewise.infra.repositories import SQLModelSettingsRepository
from duewise.models import Debt, Expense, ExpenseFrequency, FinancialState, HistoryPoint
from duewise.services.notifications import Alert

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to a throwaway database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def settings_repo(session_factory):
    return SQLModelSettingsRepository(session_factory)


# =============================================================================
# Snapshot Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Factory for snapshot debts with sensible defaults."""

    def _create(**kwargs) -> Debt:
        defaults = {
            "id": "d1",
            "name": "Test Card",
            "initial_amount": 1000.0,
            "current_amount": 100.0,
            "min_payment": 50.0,
            "due_day": 15,
        }
        defaults.update(kwargs)
        return Debt(**defaults)

    return _create


@pytest.fixture
def expense_factory():
    """Factory for fixed expenses (monthly unless told otherwise)."""

    def _create(**kwargs) -> Expense:
        defaults = {
            "id": "e1",
            "name": "Internet",
            "amount": 600.0,
            "category": "Services",
            "frequency": ExpenseFrequency.MONTHLY,
            "due_day": 5,
        }
        defaults.update(kwargs)
        return Expense(**defaults)

    return _create


@pytest.fixture
def sample_state(debt_factory, expense_factory) -> FinancialState:
    """Small snapshot with two debts, one expense and a month of history."""

    return FinancialState(
        debts=(
            debt_factory(id="bbva", name="BBVA", current_amount=45000, initial_amount=50000,
                         min_payment=2500, interest_rate=45, due_day=15),
            debt_factory(id="plata", name="Plata Card", current_amount=12000, initial_amount=15000,
                         min_payment=1000, interest_rate=65, due_day=5),
        ),
        expenses=(expense_factory(id="net", name="Internet", due_day=5),),
        history=(HistoryPoint(date="2024-02", total_debt=57000),),
    )


# =============================================================================
# Collaborator Doubles
# =============================================================================


class RecordingSink:
    """Alert sink that remembers every alert it was handed."""

    def __init__(self) -> None:
        self.alerts: list[Alert] = []

    def send(self, alert: Alert) -> None:
        self.alerts.append(alert)


class FailingSink:
    """Alert sink whose platform call always blows up."""

    def send(self, alert: Alert) -> None:
        raise RuntimeError("notification service unavailable")


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


class FakeClock:
    """Controllable stand-in for ``date.today``."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2024, 3, 12))


# =============================================================================
# Helper Utilities
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
