"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    """Interpret environment variable values as positive floats."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    parsed = float(value)
    if parsed <= 0:
        raise ValueError(f"{name} must be a positive number of seconds.")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DueWise"
    DB_FILENAME = "duewise.db"
    DEFAULT_STORAGE_KEY = "finances_er_v1"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DUEWISE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("DUEWISE_DATABASE_URL", self._build_sqlite_url())
        self.STORAGE_KEY = os.getenv("DUEWISE_STORAGE_KEY", self.DEFAULT_STORAGE_KEY)
        self.REMINDER_INTERVAL_SECONDS = _env_float("DUEWISE_REMINDER_INTERVAL", 60.0)
        self.SYNC_INTERVAL_SECONDS = _env_float("DUEWISE_SYNC_INTERVAL", 5.0)
        self.CURRENT_USER = os.getenv("DUEWISE_USER", "Edna")
        self.NOTIFICATIONS_ENABLED = _env_bool("DUEWISE_NOTIFICATIONS", default=False)

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DUEWISE_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside DATA_DIR."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            # The refresher polls storage from APScheduler's worker thread.
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}
