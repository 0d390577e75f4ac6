"""Event log — the record of one build run.

The driver reads it back for the end-of-build summary (event counts and
cache hits), and tests use it to assert on what the pipeline did.
"""

from collections import Counter, deque
from typing import Any

from mews.observability.events import BuildEvent


class EventLog:
    """Bounded, append-only store of build events.

    Args:
        max_events: Oldest events are dropped past this many.

    """

    __slots__ = ("_events", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[BuildEvent] = deque(maxlen=max_events)

    def append(self, event: BuildEvent) -> None:
        self._events.append(event)

    def query(self, event_type: type | None = None) -> list[BuildEvent]:
        """Return events of *event_type* (all events when None), most recent first."""
        return [
            event for event in reversed(self._events)
            if event_type is None or isinstance(event, event_type)
        ]

    def __len__(self) -> int:
        return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Total, capacity and per-type event counts."""
        return {
            "total": len(self._events),
            "max_events": self._max_events,
            "by_type": dict(Counter(type(event).__name__ for event in self._events)),
        }
