"""Metadata store: per-file timestamps and digests persisted across builds.

One build cycle runs Loading -> Diffing -> Persisted:

1. :func:`load` reads the metadata document (``{}`` if there is none).
2. :func:`update` diffs the current items against it, stamps each item's
   ``meta`` and reports which paths were created, updated or deleted.
3. :func:`persist` writes the new document back.

Digests are git blob hashes (SHA-1 over ``blob <len>\\0`` + UTF-8 text),
which keeps documents written by earlier releases comparable without a
migration.  Switching algorithms would report every file as updated once.

Filesystem errors propagate unchanged.  Callers must serialize ``update``
and ``persist`` calls against the same path.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from tabby._errors import ContentError, MetaDocumentError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabby._types import Clock, Item, MetaDocument, MetaRecord


def digest(text: str) -> str:
    """Lowercase hex git blob hash of ``text``."""
    data = text.encode("utf-8")
    sha = hashlib.sha1(usedforsecurity=False)
    sha.update(b"blob %d\0" % len(data))
    sha.update(data)
    return sha.hexdigest()


def timestamp() -> str:
    """Current local time as ISO-8601 with UTC offset, second precision."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


@dataclass(frozen=True, slots=True)
class MetaUpdate:
    """Outcome of diffing items against the stored metadata document.

    Attributes:
        meta: The new document: one record per current item, keyed by
            file path, in item order.
        created: Items whose path was not in the stored document.
        updated: Items whose content or html digest changed.
        deleted: Paths in the stored document with no current item.

    """

    meta: MetaDocument = field(default_factory=dict)
    created: list[Item] = field(default_factory=list)
    updated: list[Item] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        """Whether anything was created, updated or deleted."""
        return bool(self.created or self.updated or self.deleted)


def load(path: Path) -> MetaDocument:
    """Read the metadata document at ``path``.

    A missing file is an empty document; no read is attempted.

    Raises:
        OSError: If the file exists but cannot be read.
        MetaDocumentError: If the file is not a JSON object of objects.

    """
    if not path.exists():
        return {}
    raw = path.read_bytes()
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"Invalid metadata document {path}: {exc}"
        raise MetaDocumentError(msg) from exc
    if not isinstance(document, dict):
        msg = f"Metadata document {path} must be a JSON object"
        raise MetaDocumentError(msg)
    for key, record in document.items():
        if not isinstance(record, dict):
            msg = f"Metadata document {path}: entry {key!r} must be a JSON object"
            raise MetaDocumentError(msg)
    return document


def _item_path(item: Item) -> str:
    try:
        return str(item["file"]["path"])
    except (KeyError, TypeError) as exc:
        msg = f"Item has no file path: {item!r}"
        raise ContentError(msg) from exc


def _text(item: Item, key: str, path: str) -> str:
    """The string to digest for ``item[key]``; non-strings as JSON."""
    value = item.get(key)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except ValueError as exc:
        msg = f"Cannot digest {key} of {path}: {exc}"
        raise ContentError(msg) from exc


def diff(stored: MetaDocument, items: Sequence[Item], now: str) -> MetaUpdate:
    """Diff ``items`` against the ``stored`` document at time ``now``.

    Mutates each item's ``meta`` mapping in place (created if absent).
    The stored document is not modified.

    """
    result = MetaUpdate()

    for item in items:
        path = _item_path(item)
        previous: MetaRecord | None = stored.get(path)
        content_sha = digest(_text(item, "content", path))
        html_sha = digest(_text(item, "html", path))

        if previous is None:
            record = {"created": now, "modified": now, "rendered": now}
            result.created.append(item)
        else:
            record = {
                "created": previous.get("created", now),
                "modified": previous.get("modified", now),
                "rendered": previous.get("rendered", now),
            }
            content_changed = previous.get("content") != content_sha
            html_changed = previous.get("html") != html_sha
            if content_changed:
                record["modified"] = now
                record["rendered"] = now
            if html_changed:
                record["rendered"] = now
            if content_changed or html_changed:
                result.updated.append(item)

        record["content"] = content_sha
        record["html"] = html_sha
        result.meta[path] = record
        item.setdefault("meta", {}).update(record)

    result.deleted.extend(path for path in stored if path not in result.meta)
    return result


def update(path: Path, items: Sequence[Item], *, now: Clock | None = None) -> MetaUpdate:
    """Load the document at ``path`` and diff ``items`` against it.

    Args:
        path: Location of the metadata document.
        items: Current items; each must carry ``file.path``.
        now: Clock for the timestamp; defaults to :func:`timestamp`.
            Read once, so every item of one call gets the same time.

    Raises:
        OSError: If the document exists but cannot be read.
        MetaDocumentError: If the document is not a JSON object of objects.
        ContentError: If an item has no ``file.path`` or its content
            cannot be digested.

    """
    stored = load(path)
    return diff(stored, items, (now or timestamp)())


def dumps(document: MetaDocument) -> str:
    """Serialize a document the way it is persisted (2-space indent)."""
    return json.dumps(document, indent=2, ensure_ascii=False)


def persist(path: Path, document: MetaDocument) -> None:
    """Write ``document`` to ``path`` as pretty-printed UTF-8 JSON.

    Raises:
        OSError: If the file cannot be written.

    """
    path.write_text(dumps(document), encoding="utf-8")
