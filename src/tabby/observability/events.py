"""Build event model.

Defines event types for the change-detection and list-query pipeline.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Metadata events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MetaUpdated:
    """Items were diffed against the stored metadata document.

    Attributes:
        path: Metadata document path.
        created: Number of items seen for the first time.
        updated: Number of items whose content or html changed.
        deleted: Number of stored paths with no current item.
        duration_ms: Time spent loading and diffing in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    created: int
    updated: int
    deleted: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class MetaPersisted:
    """The metadata document was written.

    Attributes:
        path: Metadata document path.
        entries: Number of file records written.
        size_bytes: Size of the serialized document.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    entries: int
    size_bytes: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Query events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ItemsLinked:
    """Navigation links were attached to items.

    Attributes:
        relation: Which relation was wired.
        count: Number of items that received links.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    relation: Literal["previous_next", "sibling", "parent_child"]
    count: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ListBuilt:
    """A named list view was computed.

    Attributes:
        name: List name from the configuration.
        source_count: Number of items the list was built from.
        result_count: Number of items in the list.
        duration_ms: Time spent filtering, sorting and limiting.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    name: str
    source_count: int
    result_count: int
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type BuildEvent = MetaUpdated | MetaPersisted | ItemsLinked | ListBuilt


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
