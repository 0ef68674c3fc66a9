"""Tabby error hierarchy.

All tabby-specific errors inherit from TabbyError for easy catching.
Filesystem errors (``OSError``) are never wrapped; they reach the caller
unchanged.
"""

from typing import Literal


class TabbyError(Exception):
    """Base error for all tabby operations."""


class ConfigError(TabbyError):
    """Invalid or missing configuration."""


class ContentError(TabbyError):
    """Error in content processing (reading, diffing, linking)."""


class MetaDocumentError(ContentError):
    """The persisted metadata document could not be decoded."""


class ExpressionError(TabbyError):
    """A list expression could not be compiled or evaluated.

    Attributes:
        kind: Which list operation the expression belongs to.
        expression: The raw expression text.

    """

    def __init__(self, kind: Literal["sort", "filter"], expression: str, reason: str) -> None:
        super().__init__(f'Cannot {kind} list by "{expression}"; {reason}')
        self.kind = kind
        self.expression = expression


class ExpressionSyntaxError(ExpressionError):
    """The expression does not match the sort or filter grammar."""

    def __init__(self, kind: Literal["sort", "filter"], expression: str) -> None:
        super().__init__(kind, expression, "Illegal expression")


class UnknownPropertyError(ExpressionError):
    """A segment of the expression's property path could not be resolved."""

    def __init__(self, kind: Literal["sort", "filter"], expression: str, segment: str) -> None:
        super().__init__(kind, expression, f'Unknown property "{segment}"')
        self.segment = segment
