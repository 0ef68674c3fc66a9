"""Build observability: what each build step did and how long it took.

Events are frozen dataclasses with monotonic nanosecond timestamps,
stored in a bounded, thread-safe log.

Quick Start:
    >>> from tabby.observability import BuildCollector, EventLog, MetaUpdated
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> # run_build(items, config, collector=collector)
    >>> log.latest(MetaUpdated)

"""

from tabby.observability.collector import BuildCollector
from tabby.observability.events import (
    BuildEvent,
    ItemsLinked,
    ListBuilt,
    MetaPersisted,
    MetaUpdated,
    now_ns,
)
from tabby.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildEvent",
    "EventLog",
    "ItemsLinked",
    "ListBuilt",
    "MetaPersisted",
    "MetaUpdated",
    "now_ns",
]
