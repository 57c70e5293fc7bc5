"""Notifications sent to whatever is displaying the ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

__all__ = ["LoggingPresenter", "Notification", "NotificationKind", "Presenter", "RecordingPresenter"]


class NotificationKind(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILURE = "validation_failure"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


class Presenter:
    """Receives one notification after every ledger operation."""

    def notify(self, notification: Notification) -> None:
        raise NotImplementedError


class LoggingPresenter(Presenter):
    """Default presenter: writes notifications to the log."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def notify(self, notification: Notification) -> None:
        level = logging.INFO if notification.kind is NotificationKind.SUCCESS else logging.WARNING
        self._logger.log(level, "[%s] %s", notification.kind.value, notification.message)


class RecordingPresenter(Presenter):
    """Keeps notifications in memory; used by the API and the tests."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification:
        return self.notifications[-1]

    def clear(self) -> None:
        self.notifications.clear()
