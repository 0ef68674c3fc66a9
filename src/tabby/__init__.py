"""Tabby: incremental change detection and list queries for static sites.

Tracks per-source-file metadata across builds, classifies every input as
created, updated, unchanged or deleted, and builds named, filtered and
sorted list views with live previous/next navigation.

Quick start::

    import tabby

    config = tabby.load_config(Path("my-site/"))
    result = tabby.run_build(items, config)
    result.meta.updated          # items whose content or html changed
    result.lists["recent"]       # a named list view

List expressions::

    sort:    "meta.created DESC"
    filter:  "file.name != index.md", "title = Release*"

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "Context",
    "ListConfig",
    "TabbyConfig",
    "__version__",
    "create_list",
    "create_lists",
    "load_config",
    "read_options",
    "run_build",
    "watch_builds",
]

_LAZY_ATTRS: dict[str, tuple[str, str]] = {
    "Context": ("tabby.query.lists", "Context"),
    "ListConfig": ("tabby.config", "ListConfig"),
    "TabbyConfig": ("tabby.config", "TabbyConfig"),
    "create_list": ("tabby.query.lists", "create"),
    "create_lists": ("tabby.query.lists", "create_all"),
    "load_config": ("tabby.config_loader", "load_config"),
    "read_options": ("tabby.content.options", "read"),
    "run_build": ("tabby.build", "run_build"),
    "watch_builds": ("tabby.build", "watch_builds"),
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tabby`` fast while providing a clean top-level API.
    """
    if name in _LAZY_ATTRS:
        import importlib

        module_name, attr = _LAZY_ATTRS[name]
        return getattr(importlib.import_module(module_name), attr)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
