"""Cycle counter and scheduled hardware events."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from enum import Enum, auto


class EventKind(Enum):
    """Kinds of events the bus schedules."""

    VIDEO_INTERRUPT = auto()
    PI_DMA = auto()
    SI_DMA = auto()
    AI_DMA = auto()
    RDP = auto()
    PIF_EXECUTE_COMMAND = auto()


@dataclass(frozen=True)
class Event:
    """An event due once the cycle count reaches ``when``."""

    kind: EventKind
    when: int


@dataclass
class Clock:
    """The running cycle count and the queue of pending events."""

    count: int = 0
    _queue: list = field(default_factory=list, repr=False)
    _seq: itertools.count = field(default_factory=itertools.count, repr=False)

    def add_cycles(self, cycles: int) -> None:
        self.count += cycles

    def add_event(self, kind: EventKind, when: int) -> Event:
        event = Event(kind, when)
        heapq.heappush(self._queue, (when, next(self._seq), event))
        return event

    def pop_due(self) -> list[Event]:
        """Remove and return every event due by now, earliest first."""
        due = []
        while self._queue and self._queue[0][0] <= self.count:
            due.append(heapq.heappop(self._queue)[2])
        return due

    @property
    def pending(self) -> list[Event]:
        return [entry[2] for entry in sorted(self._queue)]