"""Validation engine: declarative schemas, a generic evaluator and error trees.

- Schemas are immutable data: each field lists its constraints in order
- ``validate(schema, candidate)`` never raises for a candidate record
- Results are either a validated record or an error tree with one node per field
"""

from .coercer import Coercer, Coercion
from .constraints import (
    ConstraintKind,
    FieldConstraint,
    coerce,
    max_length,
    max_value,
    min_length,
    min_value,
    predicate,
    required,
)
from .engine import validate, validate_field
from .factory import SchemaFactory, load_schema, schema_factory
from .predicates import PredicateRegistry, predicate_registry
from .result import ErrorTree, FieldErrors, RecordResult, ValidatedRecord, ValidationResult
from .schema import FieldSchema, FieldType, RecordSchema

__all__ = [
    # Result types
    "ValidationResult",
    "RecordResult",
    "ErrorTree",
    "FieldErrors",
    "ValidatedRecord",
    # Constraints
    "ConstraintKind",
    "FieldConstraint",
    "required",
    "min_length",
    "max_length",
    "min_value",
    "max_value",
    "predicate",
    "coerce",
    # Coercion
    "Coercer",
    "Coercion",
    # Schema
    "FieldSchema",
    "FieldType",
    "RecordSchema",
    # Engine
    "validate",
    "validate_field",
    # Factories
    "SchemaFactory",
    "schema_factory",
    "load_schema",
    "PredicateRegistry",
    "predicate_registry",
]
