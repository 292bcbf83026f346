"""JSON persistence for the financial snapshot under a single storage key.

The whole snapshot is one JSON document stored in the ``app_setting`` table.
Loading fails closed: a missing payload yields the default snapshot, and an
unparseable one is logged and also replaced by the default, so a corrupt row
never takes the application down. Another session writing the same key is
picked up by :meth:`SnapshotStorage.poll_external_change`.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Callable, Optional

from pydantic import ValidationError

from ..constants.defaults import INITIAL_STATE
from ..logging_config import get_logger
from ..models.snapshot import FinancialState
from .repositories.settings import SQLModelSettingsRepository

if TYPE_CHECKING:
    from ..services.state_store import SnapshotStore

logger = get_logger("snapshot_storage")


class SnapshotStorage:
    """Reads and writes the snapshot JSON under ``key``."""

    def __init__(
        self,
        settings_repo: SQLModelSettingsRepository,
        *,
        key: str,
        default: FinancialState = INITIAL_STATE,
    ):
        self.settings_repo = settings_repo
        self.key = key
        self.default = default
        self._last_payload: Optional[str] = None

    @staticmethod
    def serialize(state: FinancialState) -> str:
        return json.dumps(state.to_json_dict(), ensure_ascii=False)

    def parse(self, payload: str) -> FinancialState | None:
        """Return the snapshot encoded in *payload*, or ``None`` if it is invalid."""

        try:
            return FinancialState.model_validate_json(payload)
        except ValidationError as exc:
            logger.warning(
                "Stored snapshot could not be parsed",
                extra={"storage_key": self.key, "errors": exc.error_count(), "detail": str(exc)},
            )
            return None

    def has_payload(self) -> bool:
        return self.settings_repo.get_value(self.key) is not None

    def load(self) -> FinancialState:
        """Return the persisted snapshot, falling back to the default one."""

        payload = self.settings_repo.get_value(self.key)
        self._last_payload = payload
        if payload is None:
            logger.info("No stored snapshot; starting from defaults", extra={"storage_key": self.key})
            return self.default

        state = self.parse(payload)
        if state is None:
            logger.warning("Falling back to default snapshot", extra={"storage_key": self.key})
            return self.default
        return state

    def save(self, state: FinancialState) -> None:
        payload = self.serialize(state)
        if payload == self._last_payload:
            return
        self.settings_repo.set(self.key, payload, description="Financial snapshot (JSON)")
        self._last_payload = payload
        logger.debug("Snapshot saved", extra={"storage_key": self.key, "bytes": len(payload)})

    def poll_external_change(self) -> FinancialState | None:
        """Return a snapshot written by another session since our last read/write.

        Payloads that cannot be parsed are ignored; the local snapshot stays.
        """

        payload = self.settings_repo.get_value(self.key)
        if payload is None or payload == self._last_payload:
            return None
        self._last_payload = payload
        logger.info("Detected snapshot change from another session", extra={"storage_key": self.key})
        return self.parse(payload)

    def attach(self, store: "SnapshotStore") -> Callable[[], None]:
        """Persist every new snapshot the store commits; return the detach callable."""

        return store.subscribe(self.save)

    def sync_into(self, store: "SnapshotStore") -> bool:
        """Replace the store's snapshot if another session changed it."""

        state = self.poll_external_change()
        if state is None:
            return False
        store.replace(state)
        return True


__all__ = ["SnapshotStorage"]
