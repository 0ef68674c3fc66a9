"""Content layer: per-file metadata, navigation links and file watching.

Handles change detection against the persisted metadata document,
previous/next, sibling and parent/child links between items, reading
source and options files, and watching sources for rebuilds.
"""

from tabby.content.linker import ItemMap, parent_child, previous_next, sibling
from tabby.content.meta import MetaUpdate, digest
from tabby.content.watcher import ChangeEvent, ContentWatcher

__all__ = [
    "ChangeEvent",
    "ContentWatcher",
    "ItemMap",
    "MetaUpdate",
    "digest",
    "parent_child",
    "previous_next",
    "sibling",
]
