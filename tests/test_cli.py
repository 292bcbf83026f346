"""Tests for the command-line interface."""

from __future__ import annotations

import json
import logging

import pytest
from click.testing import CliRunner

from duewise.cli import cli


@pytest.fixture
def invoke(tmp_path):
    runner = CliRunner()
    env = {
        "DUEWISE_DATA_DIR": str(tmp_path),
        "DUEWISE_DEV_MODE": "0",
        "DUEWISE_DATABASE_URL": f"sqlite:///{tmp_path / 'cli.db'}",
    }

    def _invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    yield _invoke

    logger = logging.getLogger("duewise")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_projections_table_orders_by_horizon(invoke):
    result = invoke("projections")

    assert result.exit_code == 0, result.output
    names = [line.split()[0] for line in result.output.splitlines() if line[:1].strip()]
    assert names == ["Plata", "BBVA", "Fovissste"]
    assert "2 years 7 months" in result.output
    assert "Never (interest exceeds payment)" in result.output


def test_projections_json(invoke):
    result = invoke("projections", "--json")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [entry["debtId"] for entry in payload] == ["2", "1", "3"]
    assert payload[-1]["horizon"] == {"kind": "unpayable"}


def test_reminders_on_date(invoke):
    result = invoke("reminders", "--on", "2024-03-15")

    assert result.exit_code == 0, result.output
    assert "! [debt-due-1] Due today!" in result.output
    assert "[expense-4]" in result.output


def test_reminders_empty_day(invoke):
    result = invoke("reminders", "--on", "2024-03-22")

    assert result.exit_code == 0, result.output
    assert "No reminders." in result.output


def test_add_debt_and_pay_persist_between_runs(invoke):
    added = invoke("add-debt", "Car", "--balance", "9000", "--min-payment", "450", "--due-day", "20")
    assert added.exit_code == 0, added.output
    assert "Added debt Car" in added.output

    paid = invoke("--user", "Ronaldo", "pay", "1", "5000")
    assert paid.exit_code == 0, paid.output
    assert "by Ronaldo" in paid.output
    assert "remaining 40,000.00" in paid.output

    table = invoke("projections")
    assert "Car" in table.output


def test_pay_unknown_debt_fails(invoke):
    result = invoke("pay", "nope", "10")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_pay_rejects_negative_amount(invoke):
    result = invoke("pay", "1", "--", "-10")

    assert result.exit_code == 1
    assert "greater than zero" in result.output


def test_projections_show_progress(invoke):
    result = invoke("projections")

    assert result.exit_code == 0, result.output
    bbva = next(line for line in result.output.splitlines() if line.startswith("BBVA"))
    assert "10.0% paid" in bbva


def test_pay_by_records_author(invoke):
    result = invoke("pay", "2", "1000", "--by", "Ronaldo")

    assert result.exit_code == 0, result.output
    assert "by Ronaldo" in result.output


def test_projections_list_payments_per_debt(invoke):
    assert invoke("pay", "1", "5000", "--by", "Ronaldo").exit_code == 0
    assert invoke("pay", "1", "1000").exit_code == 0

    table = invoke("projections")
    assert table.exit_code == 0, table.output
    payment_lines = [line for line in table.output.splitlines() if line.startswith("    ")]
    assert len(payment_lines) == 2
    assert any("5,000.00  Ronaldo" in line for line in payment_lines)

    payload = json.loads(invoke("projections", "--json").output)
    bbva = next(entry for entry in payload if entry["debtId"] == "1")
    assert sorted(p["recordedBy"] for p in bbva["payments"]) == ["Edna", "Ronaldo"]
    assert bbva["progressPercent"] == 22.0
    plata = next(entry for entry in payload if entry["debtId"] == "2")
    assert plata["payments"] == []
