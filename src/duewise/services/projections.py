"""Rank debts by how soon their minimum payments retire them."""

from __future__ import annotations

from typing import Iterable

from ..models.snapshot import Debt
from .payoff import Finite, Horizon, PayoffResult, project_debt


def horizon_sort_key(horizon: Horizon) -> tuple[int, float]:
    """Total order over horizons: finite ascending, then every unpayable."""

    if isinstance(horizon, Finite):
        return (0, horizon.months)
    return (1, 0.0)


def rank_projections(results: Iterable[PayoffResult]) -> list[PayoffResult]:
    """Return results sorted by horizon; ties keep their input order."""

    # sorted() is stable, which keeps equal horizons in snapshot order.
    return sorted(results, key=lambda result: horizon_sort_key(result.horizon))


def rank_debts(debts: Iterable[Debt]) -> list[PayoffResult]:
    """Project every debt and rank the results."""

    return rank_projections(project_debt(debt) for debt in debts)


__all__ = ["horizon_sort_key", "rank_debts", "rank_projections"]
