"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelSettingsRepository
from .infra.snapshot_storage import SnapshotStorage
from .logging_config import get_logger
from .services.notifications import (
    AlertSink,
    LoggingAlertSink,
    NotificationDispatcher,
    Permission,
)
from .services.state_store import SnapshotStore

logger = get_logger("context")


def _headless() -> bool:
    """Without a window nothing is on screen, so alerts are always wanted."""
    return False


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    engine: Any
    session_factory: Callable[[], Session]
    settings_repo: SQLModelSettingsRepository
    storage: SnapshotStorage
    dispatcher: NotificationDispatcher
    store: SnapshotStore
    clock: Callable[[], date] = date.today
    _detach_storage: Optional[Callable[[], None]] = field(default=None, repr=False)

    def close(self) -> None:
        """Stop persisting store changes and release database connections."""

        if self._detach_storage is not None:
            self._detach_storage()
            self._detach_storage = None
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    sink: Optional[AlertSink] = None,
    is_visible: Callable[[], bool] = _headless,
    clock: Callable[[], date] = date.today,
    permission_requester: Optional[Callable[[], Permission]] = None,
) -> AppContext:
    """Create and initialize the application context.

    When *permission_requester* is given, the platform is asked for alert
    permission on startup unless the user already decided.
    """

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    settings_repo = SQLModelSettingsRepository(session_factory)
    storage = SnapshotStorage(settings_repo, key=config.STORAGE_KEY)

    dispatcher = NotificationDispatcher(
        sink or LoggingAlertSink(),
        permission=Permission.GRANTED if config.NOTIFICATIONS_ENABLED else Permission.DEFAULT,
        is_visible=is_visible,
    )
    if permission_requester is not None:
        dispatcher.request_permission(permission_requester)
    first_run = not storage.has_payload()
    store = SnapshotStore(
        storage.load(),
        dispatcher=dispatcher,
        current_user=config.CURRENT_USER,
        clock=clock,
    )
    detach = storage.attach(store)
    if first_run:
        # Other sessions start from the same defaults; an unreadable row is left alone.
        storage.save(store.snapshot)
    logger.info("Application context ready", extra={"storage_key": config.STORAGE_KEY})

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        settings_repo=settings_repo,
        storage=storage,
        dispatcher=dispatcher,
        store=store,
        clock=clock,
        _detach_storage=detach,
    )
