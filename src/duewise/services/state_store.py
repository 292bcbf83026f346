"""Copy-on-write holder for the current financial snapshot.

Every mutation builds a brand-new :class:`FinancialState` and swaps the
reference, so readers always see either the old or the new snapshot, never a
half-applied change. Subscribers are called with each new snapshot; that is
how persistence and reminder recomputation hear about changes. ``replace``
installs a snapshot that originated elsewhere (another session) wholesale:
last writer wins, nothing is merged.
"""

from __future__ import annotations

import math
import threading
import uuid
from datetime import date
from typing import Callable, Optional

from ..constants.defaults import DEFAULT_DEBT_COLOR
from ..exceptions import DebtNotFoundError, InvalidAmountError, SnapshotError
from ..logging_config import get_logger
from ..models.snapshot import (
    Debt,
    Expense,
    ExpenseFrequency,
    FinancialState,
    HistoryPoint,
    Income,
    Payment,
)
from .notifications import NotificationDispatcher

logger = get_logger("state_store")

Listener = Callable[[FinancialState], None]


def generate_id() -> str:
    """Return a short random identifier for new snapshot entities."""

    return uuid.uuid4().hex[:9]


def _require_amount(field: str, value: float, *, positive: bool = False) -> float:
    """Reject NaN/infinite/negative values before they reach the snapshot."""

    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidAmountError(f"{field} must be a number") from exc
    if not math.isfinite(number):
        raise InvalidAmountError(f"{field} must be a finite number")
    if positive and number <= 0:
        raise InvalidAmountError(f"{field} must be greater than zero")
    if number < 0:
        raise InvalidAmountError(f"{field} cannot be negative")
    return number


def _require_day(field: str, value: int | None, *, low: int, high: int) -> int | None:
    if value is None:
        return None
    if not low <= value <= high:
        raise InvalidAmountError(f"{field} must be between {low} and {high}")
    return value


class SnapshotStore:
    """Holds the current snapshot and applies actions as whole-value swaps."""

    def __init__(
        self,
        initial: FinancialState,
        *,
        dispatcher: Optional[NotificationDispatcher] = None,
        current_user: str = "Edna",
        clock: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._state = initial
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self.dispatcher = dispatcher
        self.current_user = current_user
        self.clock = clock
        self.id_factory = id_factory

    @property
    def snapshot(self) -> FinancialState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for new snapshots; return an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _update(
        self, reason: str, build: Callable[[FinancialState], FinancialState]
    ) -> FinancialState:
        """Derive the next snapshot from the current one and swap it in.

        The read, the swap and the subscriber fan-out run under one lock, so
        concurrent actions cannot overwrite each other's changes. A failing
        subscriber is logged; the swap stands and later subscribers still run.
        """

        with self._lock:
            new_state = build(self._state)
            self._state = new_state
            logger.debug("Snapshot replaced", extra={"reason": reason})
            for listener in list(self._listeners):
                try:
                    listener(new_state)
                except Exception as exc:
                    logger.error(f"Snapshot listener failed: {exc}", exc_info=True)
        return new_state

    def replace(self, state: FinancialState) -> FinancialState:
        """Install a snapshot produced by another session (last writer wins)."""

        logger.info("Snapshot replaced from external change")
        return self._update("sync", lambda _current: state)

    # --- debts -------------------------------------------------------------

    def add_debt(
        self,
        *,
        name: str,
        current_amount: float,
        initial_amount: float | None = None,
        min_payment: float = 0.0,
        color: str = DEFAULT_DEBT_COLOR,
        due_day: int | None = None,
        interest_rate: float | None = None,
    ) -> Debt:
        """Create a debt, commit it, and raise a "new debt" alert."""

        if not name or not name.strip():
            raise SnapshotError("Debt name is required")
        current = _require_amount("current_amount", current_amount)
        debt = Debt(
            id=self.id_factory(),
            name=name.strip(),
            initial_amount=_require_amount(
                "initial_amount", initial_amount if initial_amount is not None else current
            ),
            current_amount=current,
            min_payment=_require_amount("min_payment", min_payment),
            color=color,
            due_day=_require_day("due_day", due_day, low=1, high=31),
            interest_rate=(
                _require_amount("interest_rate", interest_rate) if interest_rate is not None else None
            ),
        )
        self._update(
            "add_debt", lambda state: state.model_copy(update={"debts": (*state.debts, debt)})
        )
        logger.info("Debt added", extra={"debt_id": debt.id, "debt_name": debt.name})

        if self.dispatcher is not None:
            self.dispatcher.debt_added(self.current_user, debt.name)
        return debt

    def update_debt(self, debt: Debt) -> Debt:
        """Replace the stored debt that shares ``debt.id``."""

        _require_amount("current_amount", debt.current_amount)
        _require_amount("min_payment", debt.min_payment)

        def build(state: FinancialState) -> FinancialState:
            if state.find_debt(debt.id) is None:
                raise DebtNotFoundError(debt.id)
            debts = tuple(debt if d.id == debt.id else d for d in state.debts)
            return state.model_copy(update={"debts": debts})

        self._update("update_debt", build)
        logger.info("Debt updated", extra={"debt_id": debt.id})
        return debt

    def delete_debt(self, debt_id: str) -> None:
        """Remove a debt. Its payments stay in the append-only log."""

        def build(state: FinancialState) -> FinancialState:
            if state.find_debt(debt_id) is None:
                raise DebtNotFoundError(debt_id)
            return state.model_copy(
                update={"debts": tuple(d for d in state.debts if d.id != debt_id)}
            )

        self._update("delete_debt", build)
        logger.info("Debt deleted", extra={"debt_id": debt_id})

    def record_payment(self, debt_id: str, amount: float) -> Payment:
        """Apply a payment to a debt, log it, and roll the history forward.

        The balance never goes below zero. The history point for the current
        month is refreshed when it is the latest one; otherwise a new point
        dated today is appended.
        """

        value = _require_amount("amount", amount, positive=True)
        today = self.clock().isoformat()
        payment = Payment(
            id=self.id_factory(),
            debt_id=debt_id,
            amount=value,
            date=today,
            recorded_by=self.current_user,
        )
        paid: list[Debt] = []

        def build(state: FinancialState) -> FinancialState:
            target = state.find_debt(debt_id)
            if target is None:
                raise DebtNotFoundError(debt_id)
            paid.append(target)

            debts = tuple(
                d.model_copy(update={"current_amount": max(0.0, d.current_amount - value)})
                if d.id == debt_id
                else d
                for d in state.debts
            )
            new_total = sum(d.current_amount for d in debts)

            history = state.history
            if history and history[-1].date == today[:7]:
                history = (*history[:-1], HistoryPoint(date=today[:7], total_debt=new_total))
            else:
                history = (*history, HistoryPoint(date=today, total_debt=new_total))

            return state.model_copy(
                update={
                    "debts": debts,
                    "payments": (*state.payments, payment),
                    "history": history,
                }
            )

        self._update("record_payment", build)
        logger.info(
            "Payment recorded",
            extra={"debt_id": debt_id, "amount": value, "recorded_by": self.current_user},
        )

        if self.dispatcher is not None:
            self.dispatcher.payment_recorded(self.current_user, value, paid[0].name)
        return payment

    # --- budget ------------------------------------------------------------

    def add_income(self, *, source: str, amount: float) -> Income:
        income = Income(id=self.id_factory(), source=source, amount=_require_amount("amount", amount))
        self._update(
            "add_income", lambda state: state.model_copy(update={"incomes": (*state.incomes, income)})
        )
        return income

    def remove_income(self, income_id: str) -> None:
        self._update(
            "remove_income",
            lambda state: state.model_copy(
                update={"incomes": tuple(i for i in state.incomes if i.id != income_id)}
            ),
        )

    def add_expense(
        self,
        *,
        name: str,
        amount: float,
        category: str,
        due_day: int,
        frequency: ExpenseFrequency | None = None,
    ) -> Expense:
        """Add a fixed expense; weekly due days are weekdays (0=Sunday)."""

        if frequency is ExpenseFrequency.WEEKLY:
            day = _require_day("due_day", due_day, low=0, high=6)
        else:
            day = _require_day("due_day", due_day, low=1, high=31)
        expense = Expense(
            id=self.id_factory(),
            name=name,
            amount=_require_amount("amount", amount),
            category=category,
            frequency=frequency,
            due_day=day,
        )
        self._update(
            "add_expense",
            lambda state: state.model_copy(update={"expenses": (*state.expenses, expense)}),
        )
        return expense

    def remove_expense(self, expense_id: str) -> None:
        self._update(
            "remove_expense",
            lambda state: state.model_copy(
                update={"expenses": tuple(e for e in state.expenses if e.id != expense_id)}
            ),
        )


__all__ = ["Listener", "SnapshotStore", "generate_id"]
