"""Periodic reminder recomputation and cross-session sync."""

from __future__ import annotations

import threading
from datetime import date
from typing import TYPE_CHECKING, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .logging_config import get_logger
from .models.snapshot import FinancialState
from .services.reminders import ReminderItem, compute_reminders

if TYPE_CHECKING:
    from .context import AppContext
    from .infra.snapshot_storage import SnapshotStorage
    from .services.state_store import SnapshotStore

logger = get_logger("scheduler")

ReminderListener = Callable[[tuple[ReminderItem, ...]], None]


class ReminderRefresher:
    """Keeps the reminder feed current.

    Recomputes on every snapshot the store commits and on a fixed interval so
    a date rollover with no data change is still noticed. When a storage
    collaborator is given, a second job polls it for snapshots written by
    other sessions. ``stop()`` cancels both jobs and the store subscription.
    """

    REMINDER_JOB_ID = "reminder_refresh"
    SYNC_JOB_ID = "snapshot_sync"

    def __init__(
        self,
        store: SnapshotStore,
        *,
        interval_seconds: float = 60.0,
        clock: Callable[[], date] = date.today,
        storage: Optional[SnapshotStorage] = None,
        sync_interval_seconds: float = 5.0,
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.storage = storage
        self.sync_interval_seconds = sync_interval_seconds
        self.scheduler: Optional[BackgroundScheduler] = None
        self.reminders: tuple[ReminderItem, ...] = ()
        self._listeners: list[ReminderListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def add_listener(self, listener: ReminderListener) -> Callable[[], None]:
        """Call *listener* whenever the reminder set changes."""

        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def refresh(self, state: FinancialState | None = None) -> tuple[ReminderItem, ...]:
        """Recompute reminders for the clock's current date.

        Listeners are only told about a recomputation whose item set differs
        from the previous one.
        """

        with self._lock:
            snapshot = state if state is not None else self.store.snapshot
            items = compute_reminders(snapshot, self.clock())
            changed = items != self.reminders
            self.reminders = items
            listeners = list(self._listeners)

        if changed:
            logger.info("Reminder feed changed", extra={"count": len(items)})
            for listener in listeners:
                listener(items)
        return items

    def start(self) -> None:
        """Compute once, then subscribe to the store and start the timers."""

        if self.scheduler is not None:
            logger.warning("Reminder refresher already running")
            return

        self.refresh()
        self._unsubscribe = self.store.subscribe(self.refresh)

        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            func=self.refresh,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=self.REMINDER_JOB_ID,
            name="Reminder Recomputation",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        logger.info(f"Scheduled reminder refresh every {self.interval_seconds:g}s")

        if self.storage is not None:
            self.scheduler.add_job(
                func=self._sync,
                trigger=IntervalTrigger(seconds=self.sync_interval_seconds),
                id=self.SYNC_JOB_ID,
                name="Snapshot Sync",
                replace_existing=True,
                coalesce=True,
                max_instances=1,
            )
            logger.info(f"Scheduled snapshot sync every {self.sync_interval_seconds:g}s")

        self.scheduler.start()
        logger.info("Reminder refresher started")

    def stop(self) -> None:
        """Cancel the timers and the store subscription. Safe to call twice."""

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Reminder refresher stopped")

    def _sync(self) -> None:
        """Pull in a snapshot written by another session, if any."""
        try:
            self.storage.sync_into(self.store)
        except Exception as exc:
            logger.error(f"Snapshot sync failed: {exc}", exc_info=True)


def create_refresher(ctx: AppContext, *, auto_start: bool = False) -> ReminderRefresher:
    """Create and optionally start a refresher wired to the app context.

    Args:
        ctx: Application context
        auto_start: Whether to start the timers immediately

    Returns:
        ReminderRefresher instance
    """
    refresher = ReminderRefresher(
        ctx.store,
        interval_seconds=ctx.config.REMINDER_INTERVAL_SECONDS,
        clock=ctx.clock,
        storage=ctx.storage,
        sync_interval_seconds=ctx.config.SYNC_INTERVAL_SECONDS,
    )
    if auto_start:
        refresher.start()
    return refresher
