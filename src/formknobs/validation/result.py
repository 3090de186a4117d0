"""Validation result types with consistent, predictable behavior.

Two levels of result exist:

- :class:`ValidationResult` is the outcome of checking one field. It is a
  working object: the engine builds it up while it runs a field's constraints.
- :class:`RecordResult` is the outcome of validating a whole candidate record
  against a record schema. It is immutable and carries either a
  :class:`ValidatedRecord` or a total :class:`ErrorTree`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """Outcome of validating a single field.

    ``value`` holds the (possibly coerced) value so that later constraints on
    the same field, and the final validated record, see the coerced form.
    """

    valid: bool
    value: Any
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    def add_error(self, error: str) -> ValidationResult:
        """Add an error and mark as invalid (fluent API).

        Args:
            error: Error message to add

        Returns:
            Self for chaining
        """
        self.errors.append(error)
        self.valid = False
        return self

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        """Create a successful validation result."""
        return cls(valid=True, value=value, errors=[])

    @classmethod
    def failure(cls, value: Any, errors: list[str]) -> ValidationResult:
        """Create a failed validation result.

        Args:
            value: The value that failed validation
            errors: List of error messages

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, value=value, errors=list(errors))


@dataclass(frozen=True)
class FieldErrors:
    """Error node for one field: its messages in constraint order."""

    messages: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.messages

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)


EMPTY_NODE = FieldErrors()


class ErrorTree(Mapping[str, FieldErrors]):
    """Field name to :class:`FieldErrors`, in schema declaration order.

    A tree produced by the engine is total: it has a node for every field of
    the schema, valid fields included.
    """

    __slots__ = ("_nodes",)

    def __init__(self, nodes: Mapping[str, Iterable[str] | FieldErrors] | None = None):
        built: dict[str, FieldErrors] = {}
        for name, node in (nodes or {}).items():
            built[name] = node if isinstance(node, FieldErrors) else FieldErrors(tuple(node))
        self._nodes = built

    @classmethod
    def empty(cls, field_names: Iterable[str]) -> ErrorTree:
        """Create a tree with an empty node for each field name."""
        return cls({name: EMPTY_NODE for name in field_names})

    def __getitem__(self, name: str) -> FieldErrors:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorTree):
            return list(self._nodes.items()) == list(other._nodes.items())
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(tuple(self._nodes.items()))

    def __repr__(self) -> str:
        return f"ErrorTree({self.flatten()!r})"

    @property
    def is_empty(self) -> bool:
        """True when no node carries a message."""
        return all(node.is_empty for node in self._nodes.values())

    @property
    def failing_fields(self) -> tuple[str, ...]:
        """Names of fields with at least one message, in tree order."""
        return tuple(name for name, node in self._nodes.items() if not node.is_empty)

    def messages(self, name: str) -> tuple[str, ...]:
        """Messages for a field, or an empty tuple for unknown fields."""
        node = self._nodes.get(name)
        return node.messages if node is not None else ()

    def flatten(self) -> dict[str, list[str]]:
        """Return ``{field: [messages]}`` for every node."""
        return {name: list(node.messages) for name, node in self._nodes.items()}

    def format(self) -> dict[str, Any]:
        """Return the nested ``_errors`` shape used by form templates.

        The root carries an (always empty) ``_errors`` list for record-level
        messages, followed by one ``{"_errors": [...]}`` entry per field.
        """
        formatted: dict[str, Any] = {"_errors": []}
        for name, node in self._nodes.items():
            formatted[name] = {"_errors": list(node.messages)}
        return formatted


class ValidatedRecord(Mapping[str, Any]):
    """Read-only, ordered mapping of field name to coerced value."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, Any] | Iterable[tuple[str, Any]]):
        self._values = dict(values)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValidatedRecord):
            return list(self._values.items()) == list(other._values.items())
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ValidatedRecord({self._values!r})"

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict copy of the values."""
        return dict(self._values)


@dataclass(frozen=True)
class RecordResult:
    """Tagged outcome of validating a candidate record.

    Exactly one of the two shapes occurs:

    - success: ``valid`` is True, ``value`` is a :class:`ValidatedRecord` and
      every node of ``errors`` is empty;
    - failure: ``valid`` is False, ``value`` is None and ``errors`` is the
      total error tree.
    """

    valid: bool
    value: ValidatedRecord | None
    errors: ErrorTree

    def __bool__(self) -> bool:
        return self.valid

    @property
    def record(self) -> ValidatedRecord:
        """The validated record of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if self.value is None:
            raise ValueError("A failed result carries no validated record")
        return self.value

    @classmethod
    def success(cls, value: ValidatedRecord, field_names: Iterable[str]) -> RecordResult:
        return cls(valid=True, value=value, errors=ErrorTree.empty(field_names))

    @classmethod
    def failure(cls, errors: ErrorTree) -> RecordResult:
        return cls(valid=False, value=None, errors=errors)
