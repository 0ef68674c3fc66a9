"""Build orchestration: one change-detection and list-query cycle.

Data flow::

    items (read by the caller), options file
      -> metadata diff       (created / updated / deleted, items get ``meta``)
      -> navigation links    (items get ``link``)
      -> named list views    (filter / sort / limit per config)
      -> metadata persisted

Rendering consumes the returned lists and is not part of this package.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tabby._errors import TabbyError
from tabby.config_loader import load_config
from tabby.content import linker, meta, options
from tabby.query.lists import ItemList, create

if TYPE_CHECKING:
    from tabby._types import Clock, Item
    from tabby.config import TabbyConfig
    from tabby.content.meta import MetaUpdate
    from tabby.content.watcher import ContentWatcher
    from tabby.observability.collector import BuildCollector


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of one build cycle.

    Attributes:
        meta: Metadata diff; ``meta.meta`` is the document that was persisted.
        lists: Named list views keyed by list name.
        options: User options read from the options file, empty without one.

    """

    meta: MetaUpdate
    lists: dict[str, ItemList] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def run_build(
    items: Sequence[Item],
    config: TabbyConfig,
    *,
    context: Any = None,
    collector: BuildCollector | None = None,
    now: Clock | None = None,
) -> BuildResult:
    """Run one build cycle over ``items``.

    Items are mutated in place (``meta`` and ``link``) and remain owned by
    the caller.  The metadata document is persisted only after every list
    was built, so a failing expression leaves the stored state untouched.

    Raises:
        OSError: If the options or metadata document cannot be read, or
            the metadata document cannot be written.
        TabbyError: On malformed options, metadata, items or list expressions.

    """
    meta_path = config.meta_path
    user_options = options.read(config.options_path) if config.options_path.is_file() else {}

    start = time.perf_counter()
    diff = meta.update(meta_path, items, now=now)
    if collector is not None:
        collector.record_meta_update(
            str(meta_path),
            created=len(diff.created),
            updated=len(diff.updated),
            deleted=len(diff.deleted),
            duration_ms=_elapsed_ms(start),
        )

    linker.previous_next(items)
    linker.sibling(items)
    if collector is not None:
        collector.record_link("previous_next", count=len(items))
        collector.record_link("sibling", count=len(items))

    lists: dict[str, ItemList] = {}
    for name, list_config in config.lists.items():
        start = time.perf_counter()
        lists[name] = create(items, list_config, context, name)
        if collector is not None:
            collector.record_list(
                name,
                source_count=len(items),
                result_count=len(lists[name]),
                duration_ms=_elapsed_ms(start),
            )

    meta.persist(meta_path, diff.meta)
    if collector is not None:
        collector.record_persist(
            str(meta_path),
            entries=len(diff.meta),
            size_bytes=len(meta.dumps(diff.meta).encode("utf-8")),
        )

    return BuildResult(meta=diff, lists=lists, options=user_options)


async def watch_builds(
    config: TabbyConfig,
    load_items: Callable[[TabbyConfig], Sequence[Item]],
    *,
    context: Any = None,
    collector: BuildCollector | None = None,
    watcher: ContentWatcher | None = None,
    on_build: Callable[[BuildResult], None] | None = None,
) -> None:
    """Rebuild whenever a watched file changes, until the watcher stops.

    ``load_items`` is called for every build so each cycle works on
    freshly read items and options.  A config change reloads the config
    first.
    Build failures are reported on stderr and do not end the loop.

    """
    if watcher is None:
        from tabby.content.watcher import ContentWatcher

        watcher = ContentWatcher(config)

    watcher.start()
    try:
        async for event in watcher.changes():
            try:
                if event.category == "config":
                    config = load_config(config.root)
                result = run_build(load_items(config), config, context=context, collector=collector)
            except (OSError, TabbyError) as exc:
                print(f"  Build error: {event.path.name}: {exc}", file=sys.stderr)
                continue

            diff = result.meta
            print(
                f"  Rebuilt after {event.path.name}: {len(diff.created)} created, "
                f"{len(diff.updated)} updated, {len(diff.deleted)} deleted",
                file=sys.stderr,
            )
            if on_build is not None:
                on_build(result)
    finally:
        watcher.stop()
