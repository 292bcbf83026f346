"""Best-effort system alerts for user actions.

Alerts are only raised for discrete actions (a debt added, a payment
recorded), never by reminder recomputation. An alert goes out when the
platform permission is granted and the app is not currently visible;
otherwise it is skipped. Dispatch never raises: a failing sink is logged and
the caller's state change stands.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from ..logging_config import get_logger

logger = get_logger("notifications")

DEFAULT_ICON = "https://cdn-icons-png.flaticon.com/512/2933/2933116.png"


class Permission(str, Enum):
    """Platform notification permission states."""

    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class Alert:
    title: str
    body: str
    icon: Optional[str] = None


class AlertSink(Protocol):
    """Platform facility that shows an alert to the user."""

    def send(self, alert: Alert) -> None:  # pragma: no cover - interface
        ...


class LoggingAlertSink:
    """Sink that writes alerts to the package log (headless/CLI use)."""

    def send(self, alert: Alert) -> None:
        logger.info(alert.title, extra={"alert_body": alert.body})


def _always_visible() -> bool:
    return True


class NotificationDispatcher:
    """Send at most one alert per user action, subject to permission and visibility."""

    def __init__(
        self,
        sink: AlertSink,
        *,
        permission: Permission = Permission.DEFAULT,
        is_visible: Callable[[], bool] = _always_visible,
        icon: str | None = DEFAULT_ICON,
    ):
        self.sink = sink
        self.permission = permission
        self.is_visible = is_visible
        self.icon = icon

    def request_permission(self, requester: Callable[[], Permission]) -> Permission:
        """Ask the platform for permission if the user has not decided yet."""

        if self.permission is Permission.DEFAULT:
            self.permission = Permission(requester())
            logger.info("Notification permission resolved", extra={"permission": self.permission.value})
        return self.permission

    @property
    def enabled(self) -> bool:
        return self.permission is Permission.GRANTED

    def dispatch(self, title: str, body: str) -> bool:
        """Send one alert; return whether it was handed to the sink."""

        if not self.enabled or self.is_visible():
            logger.debug(
                "Alert suppressed",
                extra={"title": title, "permission": self.permission.value},
            )
            return False

        try:
            self.sink.send(Alert(title=title, body=body, icon=self.icon))
        except Exception as exc:  # fire-and-forget: never fail the user action
            logger.warning(f"Alert delivery failed: {exc}", exc_info=True)
            return False
        return True

    def debt_added(self, user: str, debt_name: str) -> bool:
        return self.dispatch("New debt", f'{user} added the debt "{debt_name}"')

    def payment_recorded(self, user: str, amount: float, debt_name: str) -> bool:
        return self.dispatch("Payment recorded", f"{user} paid ${amount:,.2f} to {debt_name}")


__all__ = [
    "Alert",
    "AlertSink",
    "LoggingAlertSink",
    "NotificationDispatcher",
    "Permission",
]
