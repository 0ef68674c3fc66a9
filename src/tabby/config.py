"""Tabby configuration.

TabbyConfig is the central configuration object, frozen after creation.
ListConfig describes one named list view.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tabby._errors import ConfigError


@dataclass(frozen=True, slots=True)
class ListConfig:
    """Configuration for one named list.

    Attributes:
        filter: Filter expression, e.g. ``"file.name != index.md"``.
        sort: Sort expression, e.g. ``"meta.created DESC"``.
        limit: Keep at most this many items (applied after filter and sort).

    """

    filter: str | None = None
    sort: str | None = None
    limit: int | None = None

    @classmethod
    def coerce(cls, value: ListConfig | Mapping[str, Any] | None) -> ListConfig:
        """Build a ListConfig from a mapping; unknown keys are ignored.

        Raises:
            ConfigError: If a recognized key has the wrong type.

        """
        if value is None:
            return cls()
        if isinstance(value, ListConfig):
            return value
        if not isinstance(value, Mapping):
            msg = f"List config must be a mapping, got {type(value).__name__}"
            raise ConfigError(msg)

        for key in ("filter", "sort"):
            expr = value.get(key)
            if expr is not None and not isinstance(expr, str):
                msg = f"List {key} must be a string, got {type(expr).__name__}"
                raise ConfigError(msg)

        limit = value.get("limit")
        if limit is not None and (
            isinstance(limit, bool) or not isinstance(limit, int) or limit < 0
        ):
            msg = f"List limit must be a non-negative integer, got {limit!r}"
            raise ConfigError(msg)

        return cls(filter=value.get("filter"), sort=value.get("sort"), limit=limit)


@dataclass(frozen=True, slots=True)
class TabbyConfig:
    """Configuration for a tabby build.

    Attributes:
        root: Path to the site root directory.  Always resolved to an
              absolute path on construction.
        content_dir: Directory containing content sources.
        meta_file: Metadata document, relative to root.
        options_file: User options file, relative to root.
        lists: Named list configurations.

    """

    root: Path = field(default_factory=Path.cwd)
    content_dir: str = "content"
    meta_file: str = "meta.json"
    options_file: str = "options.json"
    lists: Mapping[str, ListConfig] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared via Path.relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        object.__setattr__(
            self, "lists", {name: ListConfig.coerce(cfg) for name, cfg in self.lists.items()}
        )

    @property
    def content_path(self) -> Path:
        """Absolute path to content directory."""
        return self.root / self.content_dir

    @property
    def meta_path(self) -> Path:
        """Absolute path to the metadata document."""
        return self.root / self.meta_file

    @property
    def options_path(self) -> Path:
        """Absolute path to the user options file."""
        return self.root / self.options_file
