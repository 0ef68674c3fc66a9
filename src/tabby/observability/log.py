"""Build log: bounded, thread-safe record of pipeline events.

Keeps the newest ``max_events`` events in arrival order and answers the
questions a build report asks: what happened to one metadata document,
how a named list was built, and how often each kind of event occurred.

Thread Safety:
    Appends and reads share one ``threading.Lock``; lookups work on a
    snapshot taken under it.

"""

from __future__ import annotations

import threading
from collections import Counter, deque
from collections.abc import Iterable, Iterator

from tabby.observability.events import BuildEvent, ListBuilt, MetaPersisted, MetaUpdated


class EventLog:
    """Ring buffer of build events; the oldest drop off once it is full.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[BuildEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    @property
    def max_events(self) -> int:
        return self._events.maxlen or 0

    def append(self, event: BuildEvent) -> None:
        with self._lock:
            self._events.append(event)

    def extend(self, events: Iterable[BuildEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def snapshot(self) -> list[BuildEvent]:
        """All retained events, oldest first."""
        with self._lock:
            return list(self._events)

    def __iter__(self) -> Iterator[BuildEvent]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def of_type[E](self, event_type: type[E], *, since_ns: int = 0) -> list[E]:
        """Events of ``event_type`` stamped at or after ``since_ns``, oldest first."""
        return [
            event
            for event in self.snapshot()
            if isinstance(event, event_type) and event.timestamp_ns >= since_ns
        ]

    def latest[E](self, event_type: type[E]) -> E | None:
        """The most recent event of ``event_type``, or None."""
        with self._lock:
            for event in reversed(self._events):
                if isinstance(event, event_type):
                    return event
        return None

    def document_history(self, path: str) -> list[MetaUpdated | MetaPersisted]:
        """Diff and persist events of the metadata document at ``path``."""
        history: list[MetaUpdated | MetaPersisted] = []
        for event in self.snapshot():
            match event:
                case MetaUpdated(path=event_path) | MetaPersisted(path=event_path) if (
                    event_path == path
                ):
                    history.append(event)
        return history

    def list_builds(self, name: str) -> list[ListBuilt]:
        """Every recorded build of the list called ``name``."""
        return [event for event in self.of_type(ListBuilt) if event.name == name]

    def counts(self) -> Counter[str]:
        """Number of retained events per event class name."""
        return Counter(type(event).__name__ for event in self.snapshot())

    def clear(self) -> int:
        """Drop all events and return how many there were."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count
