"""Item linker: navigation relations across a flat item collection.

Each function mutates the ``link`` mapping of the given items in place
(creating it when absent) and returns None.  The items stay owned by the
caller; the linker only attaches references to other items.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabby._types import Item


def name_key(file_name: str) -> str:
    """Lookup key for a file name: the first ``.`` becomes ``_``.

    ``post.md`` -> ``post_md``, usable as an identifier in templates.
    """
    return file_name.replace(".", "_", 1)


@dataclass(frozen=True, slots=True, eq=False)
class ItemMap:
    """Items reachable both by position and by file name.

    Attributes:
        sequence: Items in their original order.
        by_name: Items keyed by :func:`name_key` of ``meta["file_name"]``.
            Items without a known file name appear in ``sequence`` only.

    """

    sequence: tuple[Item, ...] = ()
    by_name: dict[str, Item] = field(default_factory=dict)

    @classmethod
    def from_items(cls, items: Sequence[Item]) -> ItemMap:
        by_name: dict[str, Item] = {}
        for item in items:
            meta = item.get("meta")
            if meta and meta.get("file_name"):
                by_name[name_key(meta["file_name"])] = item
        return cls(sequence=tuple(items), by_name=by_name)

    def __len__(self) -> int:
        return len(self.sequence)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.sequence)

    def at(self, index: int) -> Item:
        """Item at ``index`` in the original order."""
        return self.sequence[index]

    def get(self, name: str) -> Item | None:
        """Item registered under ``name`` (already normalized), or None."""
        return self.by_name.get(name)


def _link(item: Item) -> dict:
    return item.setdefault("link", {})


def previous_next(items: Sequence[Item]) -> None:
    """Point each item at its neighbours; the ends get None."""
    last = len(items) - 1
    for index, item in enumerate(items):
        link = _link(item)
        link["previous"] = None if index == 0 else items[index - 1]
        link["next"] = None if index == last else items[index + 1]


def sibling(items: Sequence[Item]) -> None:
    """Give every item the same map over all of ``items``."""
    siblings = ItemMap.from_items(items)
    for item in items:
        _link(item)["sibling"] = siblings


def parent_child(items: Sequence[Item], children: Sequence[Item]) -> None:
    """Parents see the children map; children see the parents map."""
    child_map = ItemMap.from_items(children)
    parent_map = ItemMap.from_items(items)
    for item in items:
        _link(item)["child"] = child_map
    for item in children:
        _link(item)["parent"] = parent_map
