"""Toast-style notifications raised by list controllers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

import structlog

logger = structlog.get_logger(__name__)

Level = Literal["success", "error"]


@dataclass(frozen=True, slots=True)
class Notification:
    level: Level
    title: str
    description: str | None = None


class Notifier(Protocol):
    def success(self, title: str, description: str | None = None) -> None: ...

    def error(self, title: str, description: str | None = None) -> None: ...


class LogNotifier:
    """Default sink: writes notifications to the structured log."""

    def success(self, title: str, description: str | None = None) -> None:
        logger.info("notify_success", title=title, description=description)

    def error(self, title: str, description: str | None = None) -> None:
        logger.warning("notify_error", title=title, description=description)


class RecordingNotifier:
    """Keeps notifications in memory for headless hosts to drain."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def success(self, title: str, description: str | None = None) -> None:
        self.notifications.append(Notification("success", title, description))

    def error(self, title: str, description: str | None = None) -> None:
        self.notifications.append(Notification("error", title, description))

    def drain(self) -> list[Notification]:
        drained, self.notifications = self.notifications, []
        return drained
