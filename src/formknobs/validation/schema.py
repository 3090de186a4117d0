"""Declarative field and record schemas.

Schemas are immutable values. Building one has no side effects, and the same
schema is meant to be reused for every validation call, from any thread.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from formknobs.exceptions import SchemaError

from .coercer import Coercion
from .constraints import ConstraintKind, FieldConstraint

if TYPE_CHECKING:
    from .result import RecordResult


class FieldType(Enum):
    """Semantic type a field reduces to after coercion."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"

    @classmethod
    def parse(cls, text: str) -> FieldType:
        try:
            return cls[text.upper()]
        except KeyError as e:
            raise ValueError(f"Invalid field type: {text}") from e


# Coercion each field type accepts; a STRING field may also declare none.
_COERCION_FOR_TYPE = {
    FieldType.STRING: Coercion.TRIM,
    FieldType.NUMBER: Coercion.NUMBER,
    FieldType.BOOLEAN: Coercion.BOOLEAN,
}


@dataclass(frozen=True)
class FieldSchema:
    """A field name, its ordered constraints and its output type.

    Declaration rules, enforced on construction:

    - at most one COERCE constraint, declared before any bound or predicate;
    - the coercion agrees with ``output_type``;
    - NUMBER and BOOLEAN fields declare their coercion.

    Raises:
        SchemaError: If a rule is broken
    """

    name: str
    constraints: tuple[FieldConstraint, ...] = ()
    output_type: FieldType = FieldType.STRING
    description: str | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of constraints but store a tuple
        object.__setattr__(self, "constraints", tuple(self.constraints))
        self._check_declaration()

    def _check_declaration(self) -> None:
        context = {"field": self.name}
        coercions = [
            (position, c) for position, c in enumerate(self.constraints)
            if c.kind is ConstraintKind.COERCE
        ]
        if len(coercions) > 1:
            raise SchemaError(f"Field '{self.name}' declares more than one coercion", context)

        if coercions:
            position, constraint = coercions[0]
            if not isinstance(constraint.parameter, Coercion):
                raise SchemaError(
                    f"Field '{self.name}' coercion parameter must be a Coercion, "
                    f"got {constraint.parameter!r}",
                    context,
                )
            for earlier in self.constraints[:position]:
                if earlier.kind.is_bound or earlier.kind is ConstraintKind.PREDICATE:
                    raise SchemaError(
                        f"Field '{self.name}': coercion must precede "
                        f"{earlier.kind.value} constraints",
                        {**context, "position": position},
                    )
            if _COERCION_FOR_TYPE[self.output_type] is not constraint.parameter:
                raise SchemaError(
                    f"Field '{self.name}': coercion {constraint.parameter.value} does not "
                    f"produce {self.output_type.value}",
                    context,
                )
        elif self.output_type is not FieldType.STRING:
            raise SchemaError(
                f"Field '{self.name}' of type {self.output_type.value} must declare a coercion",
                context,
            )

        for constraint in self.constraints:
            if constraint.kind is ConstraintKind.PREDICATE and not callable(constraint.parameter):
                raise SchemaError(f"Field '{self.name}': predicate must be callable", context)
            if constraint.kind.is_bound and not isinstance(constraint.parameter, (int, float)):
                raise SchemaError(
                    f"Field '{self.name}': {constraint.kind.value} needs a numeric bound",
                    context,
                )

    @property
    def coercion(self) -> Coercion | None:
        for constraint in self.constraints:
            if constraint.kind is ConstraintKind.COERCE:
                return constraint.parameter
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.output_type.value,
            "description": self.description,
            "constraints": [
                {"kind": c.kind.value, "rule": c.describe(), "message": c.message}
                for c in self.constraints
            ],
        }


class RecordSchema(Mapping[str, FieldSchema]):
    """Ordered mapping of field name to :class:`FieldSchema`.

    Declaration order is the order of the error tree and of the validated
    record.
    """

    __slots__ = ("name", "description", "_fields")

    def __init__(
        self,
        name: str,
        fields: Iterable[FieldSchema],
        description: str | None = None,
    ):
        """Initialize schema.

        Args:
            name: Schema name for identification
            fields: Field schemas in display order
            description: Optional schema description

        Raises:
            SchemaError: If two fields share a name
        """
        by_name: dict[str, FieldSchema] = {}
        for field_schema in fields:
            if field_schema.name in by_name:
                raise SchemaError(
                    f"Duplicate field '{field_schema.name}' in schema '{name}'",
                    {"schema": name, "field": field_schema.name},
                )
            by_name[field_schema.name] = field_schema
        self.name = name
        self.description = description
        self._fields = MappingProxyType(by_name)

    def __setattr__(self, key: str, value: Any) -> None:
        if hasattr(self, "_fields"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(key, value)

    def __getitem__(self, name: str) -> FieldSchema:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"RecordSchema({self.name!r}, fields={list(self._fields)!r})"

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def validate(self, candidate: Any) -> RecordResult:
        """Validate a candidate record against this schema.

        Shorthand for :func:`formknobs.validation.engine.validate`.
        """
        from .engine import validate

        return validate(self, candidate)

    def to_dict(self) -> dict[str, Any]:
        """Convert schema to dictionary representation.

        Predicates are reported by name, so the result is serializable but
        not a round-trip format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "fields": [field_schema.to_dict() for field_schema in self._fields.values()],
        }
