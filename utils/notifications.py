from __future__ import annotations

"""Notification utilities.

This module provides:

* :class:`Notification` - a transient, user-visible toast.
* :class:`Notifier` - collects toasts raised by the portal core so the
  Streamlit layer can render them after the current action completes.

Delayed toasts (e.g. "AI detected issues" after a submission) carry a
``delay`` in seconds instead of scheduling a timer; the UI decides how to
honour it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

logger = logging.getLogger(__name__)

LEVELS = ("success", "info", "warning", "error")

_LOG_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class Notification:
    level: str
    message: str
    delay: float = 0.0
    created_at: datetime = field(default_factory=datetime.now)


class Notifier:
    """In-memory toast queue."""

    def __init__(self) -> None:
        self._pending: List[Notification] = []

    def notify(self, level: str, message: str, delay: float = 0.0) -> Notification:
        if level not in LEVELS:
            raise ValueError(f"Unknown notification level: {level}")
        note = Notification(level=level, message=message, delay=delay)
        self._pending.append(note)
        logger.log(_LOG_LEVELS[level], "Toast [%s] %s", level, message)
        return note

    def success(self, message: str, delay: float = 0.0) -> Notification:
        return self.notify("success", message, delay)

    def info(self, message: str, delay: float = 0.0) -> Notification:
        return self.notify("info", message, delay)

    def warning(self, message: str, delay: float = 0.0) -> Notification:
        return self.notify("warning", message, delay)

    def error(self, message: str, delay: float = 0.0) -> Notification:
        return self.notify("error", message, delay)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Return and clear the queued notifications, ordered by delay."""
        notes = sorted(self._pending, key=lambda n: n.delay)
        self._pending.clear()
        return notes


__all__ = [
    "LEVELS",
    "Notification",
    "Notifier",
]
