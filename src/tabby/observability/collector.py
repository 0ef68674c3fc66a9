"""Build collector: records pipeline steps into an event log.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from tabby.observability.events import (
    ItemsLinked,
    ListBuilt,
    MetaPersisted,
    MetaUpdated,
    now_ns,
)
from tabby.observability.log import EventLog


class BuildCollector:
    """Event collector for one or more builds.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Metadata events -----

    def record_meta_update(
        self,
        path: str,
        *,
        created: int = 0,
        updated: int = 0,
        deleted: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a metadata diff."""
        self._log.append(
            MetaUpdated(
                path=path,
                created=created,
                updated=updated,
                deleted=deleted,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_persist(self, path: str, *, entries: int = 0, size_bytes: int = 0) -> None:
        """Record a metadata document write."""
        self._log.append(
            MetaPersisted(
                path=path,
                entries=entries,
                size_bytes=size_bytes,
                timestamp_ns=now_ns(),
            )
        )

    # ----- Query events -----

    def record_link(self, relation: str, *, count: int = 0) -> None:
        """Record a linking pass."""
        self._log.append(
            ItemsLinked(
                relation=relation,  # type: ignore[arg-type]
                count=count,
                timestamp_ns=now_ns(),
            )
        )

    def record_list(
        self,
        name: str,
        *,
        source_count: int = 0,
        result_count: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a list build."""
        self._log.append(
            ListBuilt(
                name=name,
                source_count=source_count,
                result_count=result_count,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )
