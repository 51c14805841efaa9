"""Notification sink used in place of broadcast warning events.

The controller never talks to a banner widget directly. It calls
``notify(level, text)`` on whatever sink the host injected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class NotifyLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Notification:
    """One transient user-visible message."""

    level: NotifyLevel
    text: str


class NotificationSink(Protocol):
    def notify(self, level: NotifyLevel, text: str) -> None: ...


class CollectingSink:
    """Sink that keeps every notification in arrival order."""

    def __init__(self) -> None:
        self.items: list[Notification] = []

    def notify(self, level: NotifyLevel, text: str) -> None:
        self.items.append(Notification(level=NotifyLevel(level), text=text))

    def texts(self, level: NotifyLevel | None = None) -> list[str]:
        """Return notification texts, optionally filtered by level."""
        return [item.text for item in self.items if level is None or item.level == level]

    def clear(self) -> None:
        self.items.clear()


_LOG_LEVELS = {
    NotifyLevel.INFO: logging.INFO,
    NotifyLevel.SUCCESS: logging.INFO,
    NotifyLevel.WARNING: logging.WARNING,
    NotifyLevel.DANGER: logging.ERROR,
}


class LoggingSink:
    """Sink that forwards notifications to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger("dirbrowser.notify")

    def notify(self, level: NotifyLevel, text: str) -> None:
        self.logger.log(_LOG_LEVELS[NotifyLevel(level)], "%s", text)


__all__ = [
    "NotifyLevel",
    "Notification",
    "NotificationSink",
    "CollectingSink",
    "LoggingSink",
]
