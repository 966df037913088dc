"""Wire protocol — decouples the agent loop from whatever renders it.

Events flow from a run to its subscribers. The CLI subscribes and prints a
step trace; tests subscribe and assert on the event sequence. A wire
belongs to one run at a time and is closed when the run ends.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any


class EventType(enum.Enum):
    RUN_BEGIN = "run_begin"
    STEP_BEGIN = "step_begin"
    THOUGHT = "thought"
    FALLBACK = "fallback"
    ACTION = "action"
    OBSERVATION = "observation"
    ERROR = "error"
    COMPLETE = "complete"
    EXHAUSTED = "exhausted"
    RUN_END = "run_end"


@dataclass
class WireEvent:
    """An event on the wire."""

    type: EventType
    data: dict[str, Any] = field(default_factory=dict)


class Wire:
    """Async message bus: agent loop -> subscribers.

    Single-producer, multi-consumer broadcast.
    """

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[WireEvent | None]] = []
        self._closed: bool = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: WireEvent) -> None:
        """Send an event to all subscribers.

        Silently drops events after ``close()`` has been called.
        """
        if self._closed:
            return
        for q in self._subscribers:
            q.put_nowait(event)

    def emit(self, type: EventType, **data: Any) -> None:
        self.send(WireEvent(type=type, data=data))

    def subscribe(self) -> asyncio.Queue[WireEvent | None]:
        """Subscribe to events. Returns a queue to read from."""
        q: asyncio.Queue[WireEvent | None] = asyncio.Queue()
        self._subscribers.append(q)
        return q

    def unsubscribe(self, q: asyncio.Queue) -> None:
        """Unsubscribe from events."""
        if q in self._subscribers:
            self._subscribers.remove(q)

    def close(self) -> None:
        """Signal all subscribers that the wire is closing."""
        if self._closed:
            return
        self._closed = True
        for q in self._subscribers:
            q.put_nowait(None)


def drain(q: asyncio.Queue[WireEvent | None]) -> list[WireEvent]:
    """Collect every event currently queued, stopping at the close sentinel."""
    events: list[WireEvent] = []
    while not q.empty():
        event = q.get_nowait()
        if event is None:
            break
        events.append(event)
    return events
