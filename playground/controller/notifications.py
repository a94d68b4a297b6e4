"""Notification service — user-facing messages raised by controller operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from playground.state.schema import NotificationKind
from playground.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Notification:
    message: str
    kind: NotificationKind

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "kind": self.kind.value}


@runtime_checkable
class Notifier(Protocol):
    """Anything that can show a notification to the user."""

    def notify(self, message: str, kind: NotificationKind) -> None: ...


class NotificationLog:
    """Collects notifications until the caller drains them (one HTTP request's worth)."""

    def __init__(self) -> None:
        self._pending: list[Notification] = []

    def notify(self, message: str, kind: NotificationKind) -> None:
        logger.debug("Notification", message=message, kind=kind.value)
        self._pending.append(Notification(message=message, kind=kind))

    @property
    def pending(self) -> tuple[Notification, ...]:
        return tuple(self._pending)

    def drain(self) -> list[Notification]:
        drained, self._pending = self._pending, []
        return drained
