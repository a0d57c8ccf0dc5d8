"""User-facing notifications and confirm-before-acting prompts."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

DISMISS_AFTER = 3.0  # seconds

SUCCESS = "success"
ERROR = "error"


@dataclass
class Notification:
    message: str
    kind: str  # "success" | "error"
    created_at: float


class Notifier:
    """Holds the latest notification until it is dismissed or times out.

    A ``sink`` callable, if given, receives every notification as it is
    raised (the CLI prints them).
    """

    def __init__(
        self,
        sink: Callable[[Notification], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        dismiss_after: float = DISMISS_AFTER,
    ) -> None:
        self._sink = sink
        self._clock = clock
        self._dismiss_after = dismiss_after
        self._current: Notification | None = None

    def notify(self, message: str, kind: str = SUCCESS) -> Notification:
        if kind not in (SUCCESS, ERROR):
            raise ValueError(f"Unknown notification kind: {kind!r}")
        note = Notification(message=message, kind=kind, created_at=self._clock())
        self._current = note
        if kind == ERROR:
            logger.error(message)
        else:
            logger.info(message)
        if self._sink is not None:
            self._sink(note)
        return note

    def success(self, message: str) -> Notification:
        return self.notify(message, SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, ERROR)

    @property
    def current(self) -> Notification | None:
        note = self._current
        if note is not None and self._clock() - note.created_at >= self._dismiss_after:
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None


@dataclass
class PendingAction:
    """An irreversible operation waiting for the user to confirm it."""

    prompt: str
    operation: Callable[[], object]
    done: bool = False

    def confirm(self):
        if self.done:
            return None
        self.done = True
        return self.operation()

    def cancel(self) -> None:
        self.done = True
