"""Load TabbyConfig from tabby.yaml if present.

Merges file config with keyword overrides. Overrides take precedence.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from tabby._errors import ConfigError
from tabby.config import TabbyConfig

CONFIG_FILE_NAMES = ("tabby.yaml", "tabby.yml", "tabby.toml")

_KNOWN_KEYS = frozenset({"content_dir", "meta_file", "options_file", "lists"})


def load_config(root: Path, **overrides: object) -> TabbyConfig:
    """Load TabbyConfig from root, optionally merging tabby.yaml.

    Looks for tabby.yaml, tabby.yml, or tabby.toml in root. If found, loads
    and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: If the config file cannot be parsed or has bad values.

    """
    file_config = _read_tabby_config(root)
    merged = {**file_config, **overrides}
    lists = merged.get("lists")
    if lists is not None and not isinstance(lists, dict):
        msg = f"'lists' must be a mapping of list name to list config, got {lists!r}"
        raise ConfigError(msg)
    return TabbyConfig(root=root, **merged)


def _read_tabby_config(root: Path) -> dict[str, object]:
    """Read tabby config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("tabby.yaml", "tabby.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "tabby.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_tabby_section(path, data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_tabby_section(path, data)


def _flatten_tabby_section(path: Path, data: object) -> dict[str, object]:
    """Extract tabby.* keys into top-level config."""
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping at the top level"
        raise ConfigError(msg)
    result: dict[str, object] = {}
    tabby = data.get("tabby")
    if isinstance(tabby, dict):
        for k, v in tabby.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    for k, v in data.items():
        if k != "tabby" and k in _KNOWN_KEYS:
            result[k] = v
    return result
