"""Touched-field tracking and error display gating.

The engine always computes the full error tree. Forms decide which of those
errors to *show*: a field's messages are shown once the user has interacted
with the field. Nothing in here affects validation itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .validation import ErrorTree
from .validation.result import EMPTY_NODE


class TouchedFields:
    """Set of field names the user has interacted with.

    Grows monotonically during one editing session; :meth:`reset` starts a new
    session.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: set[str] = set(names)

    def touch(self, name: str) -> None:
        """Mark a field as touched. Touching twice is a no-op."""
        self._names.add(name)

    def touch_all(self, names: Iterable[str]) -> None:
        self._names.update(names)

    def reset(self) -> None:
        self._names.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"TouchedFields({sorted(self._names)!r})"


def visible_errors(tree: ErrorTree, touched: TouchedFields | Iterable[str]) -> ErrorTree:
    """Gate an error tree by touched state.

    Args:
        tree: Full error tree from the engine
        touched: Touched fields (any collection of names)

    Returns:
        Tree with the same fields, where untouched fields have empty nodes
    """
    if not isinstance(touched, TouchedFields):
        touched = TouchedFields(touched)
    return ErrorTree({
        name: node if name in touched else EMPTY_NODE
        for name, node in tree.items()
    })


def display_set(tree: ErrorTree, touched: TouchedFields | Iterable[str]) -> frozenset[str]:
    """Names of fields whose errors are currently shown."""
    return frozenset(visible_errors(tree, touched).failing_fields)
