"""Query layer: list expressions and named list views."""

from tabby.query.expression import (
    FilterExpression,
    SortExpression,
    compile_expression,
    compile_filter,
    compile_sort,
)
from tabby.query.lists import Context, ItemList, Nav, create, create_all

__all__ = [
    "Context",
    "FilterExpression",
    "ItemList",
    "Nav",
    "SortExpression",
    "compile_expression",
    "compile_filter",
    "compile_sort",
    "create",
    "create_all",
]
