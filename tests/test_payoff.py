"""Tests for the payoff horizon calculator.

Covers:
- Already-paid balances and zero payments
- Linear payoff when no interest is charged
- The NPER formula for interest-bearing debts
- Payments that never outrun interest (Unpayable)
- Display formatting of horizons
"""

from __future__ import annotations

import json
import math

import pytest

from duewise.services.payoff import (
    UNPAYABLE,
    Finite,
    calculate_payoff,
    describe_horizon,
    monthly_rate,
    project_debt,
)
from tests.conftest import assert_float_equal


class TestCalculatePayoff:
    @pytest.mark.parametrize("payment,rate", [(0, None), (100, 0), (50, 99.0), (-5, 20)])
    def test_zero_balance_is_already_paid(self, payment, rate):
        assert calculate_payoff(0, payment, rate) == Finite(0.0)

    def test_negative_balance_is_treated_as_paid(self):
        assert calculate_payoff(-10, 100, 12) == Finite(0.0)

    @pytest.mark.parametrize("payment", [0, -1])
    def test_no_payment_is_unpayable(self, payment):
        assert calculate_payoff(1000, payment, 10) is UNPAYABLE

    def test_zero_rate_is_linear(self):
        assert calculate_payoff(1000, 300, 0) == Finite(1000 / 300)

    def test_missing_rate_means_no_interest(self):
        assert calculate_payoff(1200, 100) == Finite(12.0)

    def test_bbva_scenario(self):
        """45000 at 45% APR paying 2500/month clears in about 30.5 months."""
        horizon = calculate_payoff(45000, 2500, 45)

        assert isinstance(horizon, Finite)
        expected = math.log(2500 / 812.5) / math.log(1.0375)
        assert_float_equal(horizon.months, expected, tolerance=1e-9)
        assert_float_equal(horizon.months, 30.5, tolerance=0.1)

    def test_plata_card_scenario(self):
        horizon = calculate_payoff(15000, 1000, 65)

        assert isinstance(horizon, Finite)
        assert_float_equal(horizon.months, 31.7, tolerance=0.1)

    def test_interest_exceeding_payment_is_unpayable(self):
        # r = 0.05, accrued = 500 per month against a 50 payment
        assert calculate_payoff(10000, 50, 60) is UNPAYABLE

    @pytest.mark.parametrize("balance", [0.01, 1, 500, 1_000_000])
    def test_unpayable_whenever_payment_covers_no_more_than_interest(self, balance):
        rate = 36.0
        accrued = balance * monthly_rate(rate)
        assert calculate_payoff(balance, accrued, rate) is UNPAYABLE
        assert calculate_payoff(balance, accrued * 0.5, rate) is UNPAYABLE

    def test_is_deterministic(self):
        assert calculate_payoff(750000, 5000, 11) == calculate_payoff(750000, 5000, 11)


class TestMonthlyRate:
    def test_converts_annual_percent(self):
        assert monthly_rate(12) == pytest.approx(0.01)

    def test_none_is_zero(self):
        assert monthly_rate(None) == 0.0


class TestProjectDebt:
    def test_reads_debt_fields(self, debt_factory):
        debt = debt_factory(current_amount=1200, min_payment=100, interest_rate=None)

        result = project_debt(debt)

        assert result.debt is debt
        assert result.debt_id == debt.id
        assert result.horizon == Finite(12.0)

    def test_does_not_mutate_debt(self, debt_factory):
        debt = debt_factory(current_amount=45000, min_payment=2500, interest_rate=45)
        before = debt.model_dump()

        project_debt(debt)

        assert debt.model_dump() == before

    def test_serializes_tagged_horizon(self, debt_factory):
        finite = project_debt(debt_factory(id="a", current_amount=100, min_payment=50))
        never = project_debt(debt_factory(id="b", current_amount=100, min_payment=0))

        assert finite.to_dict() == {"debtId": "a", "horizon": {"kind": "finite", "months": 2.0}}
        assert never.to_dict() == {"debtId": "b", "horizon": {"kind": "unpayable"}}
        # Round-trips through JSON without an Infinity literal
        assert "Infinity" not in json.dumps([finite.to_dict(), never.to_dict()])


class TestDescribeHorizon:
    def test_paid_off(self):
        assert describe_horizon(Finite(0.0)) == "Paid off"

    def test_unpayable(self):
        assert describe_horizon(UNPAYABLE) == "Never (interest exceeds payment)"

    def test_months_only(self):
        assert describe_horizon(Finite(6.2)) == "7 months"

    def test_single_month(self):
        assert describe_horizon(Finite(0.4)) == "1 month"

    def test_years_and_months(self):
        assert describe_horizon(Finite(30.5)) == "2 years 7 months"

    def test_single_year(self):
        assert describe_horizon(Finite(14)) == "1 year 2 months"

    def test_whole_years_keep_zero_months(self):
        assert describe_horizon(Finite(12)) == "1 year 0 months"
