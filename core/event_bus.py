"""Thread-safe bus carrying feedback events to haptic, speech and history drivers."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
import logging
import threading
import time
from typing import Deque


LOGGER = logging.getLogger(__name__)

PRIORITY_RANKS = {"low": 0, "normal": 1, "high": 2, "critical": 3}


@dataclass(frozen=True)
class FeedbackEvent:
    """Outbound instruction for an external driver.

    ``payload`` is a haptic pattern for the haptic channel, spoken text for
    the speech channel and a transcription record for the history channel.
    Events sharing a ``replace_key`` on the same channel supersede each
    other while still queued.
    """

    channel: str
    payload: object
    priority: str = "normal"
    delay_ms: int = 0
    metadata: dict[str, object] = field(default_factory=dict)
    replace_key: str | None = None
    created_at: float = field(default_factory=time.monotonic)

    @property
    def rank(self) -> int:
        return PRIORITY_RANKS.get(self.priority, PRIORITY_RANKS["normal"])


class EventBus:
    """Bounded feedback queue; drivers take the most urgent event first."""

    def __init__(self, maxlen: int = 200) -> None:
        self._maxlen = max(1, int(maxlen))
        self._pending: Deque[FeedbackEvent] = deque()
        self._ready = threading.Condition(threading.Lock())

    @property
    def maxlen(self) -> int:
        return self._maxlen

    def publish(self, event: FeedbackEvent) -> None:
        with self._ready:
            if event.replace_key is not None:
                self._discard_superseded(event)
            if len(self._pending) >= self._maxlen:
                dropped = self._pending.popleft()
                LOGGER.warning("[FEEDBACK] bus full; dropped queued %s event", dropped.channel)
            self._pending.append(event)
            self._ready.notify()

    def get_next(self, timeout: float | None = None) -> FeedbackEvent | None:
        """Block up to ``timeout`` seconds, then pop the most urgent event."""

        with self._ready:
            if not self._pending:
                self._ready.wait(timeout=timeout)
            if not self._pending:
                return None
            # max() keeps the earliest of equally urgent events.
            index = max(range(len(self._pending)), key=lambda i: self._pending[i].rank)
            event = self._pending[index]
            del self._pending[index]
            return event

    def drain(self) -> list[FeedbackEvent]:
        """Remove and return every queued event in publish order."""

        with self._ready:
            events = list(self._pending)
            self._pending.clear()
            return events

    def notify(self) -> None:
        with self._ready:
            self._ready.notify_all()

    def __len__(self) -> int:
        with self._ready:
            return len(self._pending)

    def _discard_superseded(self, event: FeedbackEvent) -> None:
        stale = [
            queued
            for queued in self._pending
            if queued.channel == event.channel and queued.replace_key == event.replace_key
        ]
        for queued in stale:
            self._pending.remove(queued)
        if stale:
            LOGGER.debug("[FEEDBACK] %d queued %s event(s) superseded", len(stale), event.channel)
