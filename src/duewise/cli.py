"""Command-line interface for DueWise."""

from __future__ import annotations

import json
import threading

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .exceptions import SnapshotError
from .logging_config import setup_logging
from .scheduler import create_refresher
from .services.payoff import describe_horizon
from .services.projections import rank_debts
from .services.reminders import ReminderItem, compute_reminders

RECENT_PAYMENTS = 3


def _echo_reminders(items: tuple[ReminderItem, ...]) -> None:
    if not items:
        click.echo("No reminders.")
        return
    for item in items:
        marker = "!" if item.kind.value == "warning" else "-"
        click.echo(f"{marker} [{item.id}] {item.title}: {item.message}")


@click.group()
@click.option("--user", default=None, help="Profile recorded as the author of actions")
@click.pass_context
def cli(ctx: click.Context, user: str | None) -> None:
    """Debt payoff projections and payment reminders."""

    config = BaseConfig()
    if user:
        config.CURRENT_USER = user
    setup_logging(config)
    app_ctx = create_app_context(config)
    ctx.obj = app_ctx
    ctx.call_on_close(app_ctx.close)


@cli.command("projections")
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON instead of a table")
@click.pass_obj
def projections(app_ctx: AppContext, as_json: bool) -> None:
    """List debts ordered by months until payoff."""

    snapshot = app_ctx.store.snapshot
    results = rank_debts(snapshot.debts)
    if as_json:
        payload = [
            {
                **r.to_dict(),
                "progressPercent": round(r.debt.progress_percent, 2),
                "payments": [p.to_json_dict() for p in snapshot.payments_for(r.debt_id)],
            }
            for r in results
        ]
        click.echo(json.dumps(payload, indent=2))
        return
    for result in results:
        click.echo(
            f"{result.debt.name:<20} {result.debt.current_amount:>14,.2f}  "
            f"{result.debt.progress_percent:5.1f}% paid  {describe_horizon(result.horizon)}"
        )
        for payment in snapshot.payments_for(result.debt_id)[:RECENT_PAYMENTS]:
            click.echo(f"    {payment.date}  {payment.amount:>12,.2f}  {payment.recorded_by}")


@cli.command("reminders")
@click.option(
    "--on",
    "on_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Evaluate reminders for this date instead of today",
)
@click.pass_obj
def reminders(app_ctx: AppContext, on_date) -> None:
    """Show the reminders active on a date."""

    today = on_date.date() if on_date else app_ctx.clock()
    _echo_reminders(compute_reminders(app_ctx.store.snapshot, today))


@cli.command("add-debt")
@click.argument("name")
@click.option("--balance", type=float, required=True, help="Current balance")
@click.option("--initial", type=float, default=None, help="Original amount (defaults to balance)")
@click.option("--min-payment", type=float, default=0.0, show_default=True)
@click.option("--rate", type=float, default=None, help="Annual interest rate, percent")
@click.option("--due-day", type=click.IntRange(1, 31), default=None)
@click.pass_obj
def add_debt(
    app_ctx: AppContext,
    name: str,
    balance: float,
    initial: float | None,
    min_payment: float,
    rate: float | None,
    due_day: int | None,
) -> None:
    """Add a debt."""

    try:
        debt = app_ctx.store.add_debt(
            name=name,
            current_amount=balance,
            initial_amount=initial,
            min_payment=min_payment,
            interest_rate=rate,
            due_day=due_day,
        )
    except SnapshotError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Added debt {debt.name} ({debt.id})")


@cli.command("pay")
@click.argument("debt_id")
@click.argument("amount", type=float)
@click.option("--by", "by_user", default=None, help="Profile that made the payment")
@click.pass_obj
def pay(app_ctx: AppContext, debt_id: str, amount: float, by_user: str | None) -> None:
    """Record a payment toward a debt."""

    if by_user:
        app_ctx.store.current_user = by_user
    try:
        payment = app_ctx.store.record_payment(debt_id, amount)
    except SnapshotError as exc:
        raise click.ClickException(str(exc)) from exc
    debt = app_ctx.store.snapshot.find_debt(debt_id)
    click.echo(
        f"Recorded {payment.amount:,.2f} by {payment.recorded_by}; "
        f"remaining {debt.current_amount:,.2f}"
    )


@cli.command("watch")
@click.pass_obj
def watch(app_ctx: AppContext) -> None:
    """Keep reminders current and print them whenever they change."""

    refresher = create_refresher(app_ctx)
    refresher.add_listener(_echo_reminders)
    stop = threading.Event()
    refresher.start()
    click.echo(f"Watching reminders for {app_ctx.clock().isoformat()} (Ctrl+C to stop)")
    try:
        while not stop.wait(1.0):
            pass
    except KeyboardInterrupt:
        click.echo("Stopping...")
    finally:
        refresher.stop()


def main() -> None:  # pragma: no cover - console entry point
    cli()
