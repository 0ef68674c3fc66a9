"""Shared test fixtures for tabby."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

FIXED_NOW = "1970-01-01T01:00:00+01:00"

# Git blob hashes of the strings the tests use.
SHA_EMPTY = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"
SHA_HTML = "58b78820701d32dac4450754e291bb6cf19c6e46"  # "<html/>"
SHA_DATA = "2801f6fa981c15818a1a7654abca07b5d4d731bc"  # '{"some":"data"}'


@pytest.fixture
def clock() -> Any:
    """A clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal site structure for testing.

    Returns the path to the site root with a content/ directory,
    an options file and a tabby.yaml declaring two lists.
    """
    content = tmp_path / "content"
    content.mkdir()
    (content / "hello.md").write_text(
        "---\ntitle: Hello\n---\n\nHello world.\n", encoding="utf-8"
    )
    (content / "second.md").write_text(
        "---\ntitle: Second\n---\n\nAnother post.\n", encoding="utf-8"
    )

    (tmp_path / "options.json").write_text('{"site": "Example"}', encoding="utf-8")
    (tmp_path / "tabby.yaml").write_text(
        "lists:\n"
        "  latest:\n"
        "    sort: title DESC\n"
        "    limit: 1\n"
        "  posts:\n"
        "    filter: file.suffix = .md\n",
        encoding="utf-8",
    )
    return tmp_path


def make_item(path: str, **fields: Any) -> dict[str, Any]:
    """Create an item the way the file reader would hand it over."""
    return {"file": {"path": path, "name": Path(path).name}, **fields}
