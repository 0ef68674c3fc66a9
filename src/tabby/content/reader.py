"""File reader: turns one source file into an item mapping.

Structured files (``.json``, ``.yaml``/``.yml``, ``.toml``) decode to their
top-level mapping.  Any other file is treated as text with optional YAML
front matter::

    ---
    title: Hello
    ---
    Body text becomes ``content``.

Every result carries a ``file`` descriptor.  Text items also get
``meta.file_name``, which the linker uses for name lookups.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml

from tabby._errors import ContentError

_FRONT_MATTER_FENCE = "---"


def describe(path: Path) -> dict[str, str]:
    """File descriptor attached to every item read from ``path``."""
    return {
        "path": str(path),
        "name": path.name,
        "stem": path.stem,
        "suffix": path.suffix,
    }


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split ``text`` into its YAML front matter mapping and body.

    Text without an opening ``---`` line has empty front matter.

    Raises:
        ContentError: If the front matter is unterminated, not valid YAML,
            or not a mapping.

    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != _FRONT_MATTER_FENCE:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].rstrip() == _FRONT_MATTER_FENCE:
            header = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            break
    else:
        msg = "Unterminated front matter"
        raise ContentError(msg)

    try:
        data = yaml.safe_load(header) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid front matter: {exc}"
        raise ContentError(msg) from exc
    if not isinstance(data, dict):
        msg = "Front matter must be a mapping"
        raise ContentError(msg)
    return data, body.lstrip("\n")


def _decode(path: Path, text: str) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix not in (".json", ".yaml", ".yml", ".toml"):
        front_matter, body = split_front_matter(text)
        return {**front_matter, "content": body}

    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix == ".toml":
            data = tomllib.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        msg = f"Cannot parse {path.name}: {exc}"
        raise ContentError(msg) from exc

    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping at the top level"
        raise ContentError(msg)
    return data


def read_file(path: Path | str) -> dict[str, Any]:
    """Read and decode the file at ``path`` into an item.

    Raises:
        OSError: If the file cannot be read.
        ContentError: If the file's contents cannot be decoded.

    """
    path = Path(path)
    item = _decode(path, path.read_text(encoding="utf-8"))
    item["file"] = describe(path)
    if "content" in item:
        item.setdefault("meta", {}).setdefault("file_name", path.name)
    return item
