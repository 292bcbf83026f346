"""Service module exports."""

from . import (
    due_dates,
    notifications,
    payoff,
    projections,
    reminders,
    state_store,
)

__all__ = [
    "due_dates",
    "notifications",
    "payoff",
    "projections",
    "reminders",
    "state_store",
]
