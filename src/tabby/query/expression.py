"""List expressions: compact sort and filter syntax over item properties.

Two grammars, both addressing items by a dot-separated property path::

    sort:    <path> [ASC|DESC]          e.g. "meta.created DESC"
    filter:  <path> (=|!=) <value>      e.g. "file.name = 2013-*"

A filter value with a single leading or trailing ``*`` matches by suffix or
prefix on the stringified property value.  Without a wildcard the
stringified value must match exactly.

Compilation raises :class:`ExpressionSyntaxError` for malformed input.
Evaluation raises :class:`UnknownPropertyError` naming the first path
segment that could not be resolved on an item.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from tabby._errors import ExpressionSyntaxError, UnknownPropertyError

if TYPE_CHECKING:
    from tabby._types import ExpressionKind

_FILTER_PATTERN = re.compile(r"^\s*([^\s=!]+)\s*(!=|=)\s*(.*?)\s*$")

_MISSING = object()

_NUMBERS = (int, float)


def resolve(item: Any, path: str, *, kind: ExpressionKind, expression: str) -> Any:
    """Resolve a dotted property path against an item.

    Each segment is looked up as a mapping key, falling back to an
    attribute for non-mapping values.

    Raises:
        UnknownPropertyError: If a segment is missing.  The error names
            that segment, not the whole path.

    """
    value = item
    for segment in path.split("."):
        if isinstance(value, Mapping):
            value = value.get(segment, _MISSING)
        else:
            value = getattr(value, segment, _MISSING)
        if value is _MISSING:
            raise UnknownPropertyError(kind, expression, segment)
    return value


def stringify(value: Any) -> str:
    """Render a resolved value the way it is spelled in JSON documents."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _rank(value: Any) -> tuple[int, Any]:
    if value is None:
        return 0, 0
    if isinstance(value, _NUMBERS):
        return 1, value
    if isinstance(value, str):
        return 2, value
    return 3, stringify(value)


def natural_compare(left: Any, right: Any) -> int:
    """Three-way comparison of two resolved values under a total order.

    ``None`` sorts first, then numbers (compared numerically), then
    strings.  Anything else (dates, lists, mappings) sorts last by its
    :func:`stringify` spelling, which keeps ISO dates in calendar order.

    """
    left, right = _rank(left), _rank(right)
    return (left > right) - (left < right)


@dataclass(frozen=True, slots=True)
class SortExpression:
    """A compiled ``<path> [ASC|DESC]`` expression.

    Attributes:
        expression: The raw expression text.
        path: Dotted property path.
        descending: True for ``DESC``.

    """

    expression: str
    path: str
    descending: bool = False

    def key(self, item: Any) -> Any:
        """Sort key for an item: its resolved property value."""
        return resolve(item, self.path, kind="sort", expression=self.expression)

    def compare_keys(self, left: Any, right: Any) -> int:
        """Three-way comparison of two resolved keys in this direction."""
        result = natural_compare(left, right)
        return -result if self.descending else result

    def compare(self, a: Any, b: Any) -> int:
        """Three-way comparison of two items (negative, zero, positive)."""
        return self.compare_keys(self.key(a), self.key(b))

    def apply(self, items: Iterable[Any]) -> list[Any]:
        """Return a new list of the items, stably sorted.

        Every item's key is resolved before sorting, so a missing property
        raises even when there is nothing to compare against.
        """
        keyed = [(self.key(item), item) for item in items]
        by_key = functools.cmp_to_key(lambda a, b: self.compare_keys(a[0], b[0]))
        return [item for _, item in sorted(keyed, key=by_key)]


@dataclass(frozen=True, slots=True)
class FilterExpression:
    """A compiled ``<path> (=|!=) <value>`` expression.

    Calling the expression on an item returns whether it is retained.

    Attributes:
        expression: The raw expression text.
        path: Dotted property path.
        operator: ``=`` or ``!=``.
        value: Comparison value with any wildcard removed.
        match: ``exact``, ``prefix`` (``val*``) or ``suffix`` (``*val``).

    """

    expression: str
    path: str
    operator: Literal["=", "!="]
    value: str
    match: Literal["exact", "prefix", "suffix"] = "exact"

    def __call__(self, item: Any) -> bool:
        actual = stringify(resolve(item, self.path, kind="filter", expression=self.expression))
        if self.match == "prefix":
            matched = actual.startswith(self.value)
        elif self.match == "suffix":
            matched = actual.endswith(self.value)
        else:
            matched = actual == self.value
        return matched if self.operator == "=" else not matched

    def apply(self, items: Iterable[Any]) -> list[Any]:
        """Return a new list of the matching items in their original order."""
        return [item for item in items if self(item)]


def compile_sort(expression: str) -> SortExpression:
    """Compile a sort expression.

    Raises:
        ExpressionSyntaxError: If the expression is empty, has more than
            two tokens, or the direction is not exactly ``ASC``/``DESC``.

    """
    tokens = expression.split()
    if len(tokens) == 1:
        return SortExpression(expression=expression, path=tokens[0])
    if len(tokens) == 2 and tokens[1] in ("ASC", "DESC"):
        return SortExpression(
            expression=expression, path=tokens[0], descending=tokens[1] == "DESC"
        )
    raise ExpressionSyntaxError("sort", expression)


def compile_filter(expression: str) -> FilterExpression:
    """Compile a filter expression.

    Raises:
        ExpressionSyntaxError: If no ``=`` / ``!=`` comparison is found.

    """
    match = _FILTER_PATTERN.match(expression)
    if match is None:
        raise ExpressionSyntaxError("filter", expression)
    path, operator, value = match.groups()

    if len(value) > 1 and value.endswith("*") and value.count("*") == 1:
        return FilterExpression(expression, path, operator, value[:-1], "prefix")
    if len(value) > 1 and value.startswith("*") and value.count("*") == 1:
        return FilterExpression(expression, path, operator, value[1:], "suffix")
    if value == "*":
        return FilterExpression(expression, path, operator, "", "prefix")
    return FilterExpression(expression, path, operator, value)


def compile_expression(
    expression: str, kind: ExpressionKind
) -> SortExpression | FilterExpression:
    """Compile ``expression`` as the given kind of list operation."""
    if kind == "sort":
        return compile_sort(expression)
    if kind == "filter":
        return compile_filter(expression)
    msg = f"Unknown expression kind {kind!r}; expected 'sort' or 'filter'"
    raise ValueError(msg)
