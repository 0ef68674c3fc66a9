"""List builder: named, filtered, sorted and limited views over items.

A list is computed once from the source items and then stays fixed.  Its
``nav`` pointers do not: they follow whichever item the shared context
marks as ``current``, so a renderer can walk the items one by one and read
the neighbours of the item being rendered.

Example::

    context = Context()
    lists = create_all(items, {"recent": {"sort": "meta.created DESC", "limit": 5}}, context)
    for item in items:
        context.current = item
        lists["recent"].nav.previous  # neighbour of ``item`` in "recent"
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tabby.config import ListConfig
from tabby.query.expression import compile_filter, compile_sort

if TYPE_CHECKING:
    from collections.abc import Sequence


class Context:
    """Mutable render context shared by all lists of one build.

    Attributes:
        current: The item currently being rendered, or None.

    """

    __slots__ = ("current",)

    def __init__(self, current: Any = None) -> None:
        self.current = current

    def __repr__(self) -> str:
        return f"Context(current={self.current!r})"


def _current_of(context: Any) -> Any:
    """Read ``current`` from a Context-like object or a mapping."""
    if context is None:
        return None
    if isinstance(context, Mapping):
        return context.get("current")
    return getattr(context, "current", None)


class Nav:
    """Live previous/next pointers for the context's current item.

    The current item is matched by identity.  The index lookup is cached
    and redone only when the context's ``current`` changes.

    """

    __slots__ = ("_cached_current", "_cached_index", "_context", "_items")

    def __init__(self, items: Sequence[Any], context: Any = None) -> None:
        self._items = items
        self._context = context
        self._cached_current: Any = None
        self._cached_index: int | None = None

    def _index(self) -> int | None:
        current = _current_of(self._context)
        if current is None:
            return None
        if current is not self._cached_current:
            self._cached_current = current
            self._cached_index = next(
                (i for i, item in enumerate(self._items) if item is current), None
            )
        return self._cached_index

    @property
    def previous(self) -> Any:
        """The item before the current one, or None."""
        index = self._index()
        if index is None or index == 0:
            return None
        return self._items[index - 1]

    @property
    def next(self) -> Any:
        """The item after the current one, or None."""
        index = self._index()
        if index is None or index == len(self._items) - 1:
            return None
        return self._items[index + 1]


class ItemList(list):
    """An ordered list of items with a name and live ``nav`` pointers.

    Compares equal to a plain list with the same items.

    """

    def __init__(
        self, items: Sequence[Any] = (), *, name: str | None = None, context: Any = None
    ) -> None:
        super().__init__(items)
        self.name = name
        self.nav = Nav(self, context)


def create(
    items: Sequence[Any],
    config: ListConfig | Mapping[str, Any] | None = None,
    context: Any = None,
    name: str | None = None,
) -> ItemList:
    """Build a list view over ``items``; the input is never mutated.

    Pipeline order:
        1. Filter (original relative order preserved)
        2. Stable sort
        3. Truncate to ``limit``
        4. Bind ``nav`` to ``context``

    Raises:
        ExpressionSyntaxError: If the filter or sort expression is malformed.
        UnknownPropertyError: If an item lacks a property the expression names.
        ConfigError: If ``config`` has wrong value types.

    """
    list_config = ListConfig.coerce(config)
    result = list(items)

    if list_config.filter is not None:
        result = compile_filter(list_config.filter).apply(result)
    if list_config.sort is not None:
        result = compile_sort(list_config.sort).apply(result)
    if list_config.limit is not None:
        result = result[: list_config.limit]

    return ItemList(result, name=name, context=context)


def create_all(
    items: Sequence[Any],
    config_map: Mapping[str, ListConfig | Mapping[str, Any]],
    context: Any = None,
) -> dict[str, ItemList]:
    """Build one independent list per entry of ``config_map``."""
    return {name: create(items, config, context, name) for name, config in config_map.items()}
