"""Options loader: user options read through the file reader.

The reader attaches a ``file`` descriptor to everything it reads; options
never carry it.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from tabby.content.reader import read_file


def read(
    path: Path | str,
    reader: Callable[[Path | str], dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Read options from ``path`` without the ``file`` descriptor.

    Errors raised by the reader propagate unchanged.
    """
    parsed = (reader or read_file)(path)
    return {key: value for key, value in parsed.items() if key != "file"}
