"""Shared type definitions for tabby."""

from collections.abc import Callable, MutableMapping
from typing import Any, Literal

# A content item: an externally owned record with at least ``file``
# and usually ``content`` / ``html``.  Tabby adds ``meta`` and ``link``.
type Item = MutableMapping[str, Any]

# Per-file metadata record as persisted in the metadata document
type MetaRecord = dict[str, str]

# File path (string key) -> metadata record
type MetaDocument = dict[str, MetaRecord]

# Kind of list expression
type ExpressionKind = Literal["sort", "filter"]

# Zero-argument clock returning an ISO-8601 timestamp
type Clock = Callable[[], str]
