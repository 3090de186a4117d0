"""Validation engine: check a candidate record against a record schema.

The engine is a pure function of its two inputs. It holds no state, performs
no I/O besides debug logging, and never raises for a candidate record, however
malformed: every outcome is a well-formed :class:`RecordResult`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .coercer import Coercer
from .constraints import ConstraintKind, check
from .result import ErrorTree, RecordResult, ValidatedRecord, ValidationResult
from .schema import FieldSchema, RecordSchema

logger = logging.getLogger(__name__)

_COERCER = Coercer()


def validate_field(field_schema: FieldSchema, raw: Any) -> ValidationResult:
    """Run one field's constraints against its raw value.

    Constraints run in declared order and every failing constraint adds its
    message; nothing short-circuits except a failed coercion, after which the
    value is not of the type bound and predicate checks expect, so those are
    skipped. REQUIRED still runs after a failed coercion and sees the raw value.

    Args:
        field_schema: Field to validate
        raw: Raw value from the candidate record (None when absent)

    Returns:
        ValidationResult whose value is the coerced value
    """
    result = ValidationResult.success(raw)
    usable = True

    for constraint in field_schema.constraints:
        if constraint.kind is ConstraintKind.COERCE:
            coerced = _COERCER.coerce(result.value, constraint.parameter)
            if coerced.valid:
                result.value = coerced.value
            else:
                usable = False
                result.add_error(constraint.message)
            continue

        if not usable and constraint.kind is not ConstraintKind.REQUIRED:
            continue

        if not check(constraint, result.value):
            result.add_error(constraint.message)

    return result


def validate(schema: RecordSchema, candidate: Any) -> RecordResult:
    """Validate a candidate record against a schema.

    Args:
        schema: Record schema to validate against
        candidate: Mapping of field name to raw value. Keys the schema does
            not know are ignored; missing keys read as None. Anything that is
            not a mapping is treated as an empty record.

    Returns:
        Success carrying a ValidatedRecord of coerced values in schema order,
        or failure carrying an ErrorTree with a node for every schema field
    """
    if not isinstance(candidate, Mapping):
        logger.debug(
            f"Schema '{schema.name}': candidate is {type(candidate).__name__}, "
            "validating as empty record"
        )
        candidate = {}

    nodes: dict[str, list[str]] = {}
    values: dict[str, Any] = {}

    for name, field_schema in schema.items():
        result = validate_field(field_schema, candidate.get(name))
        nodes[name] = result.errors
        values[name] = result.value

    errors = ErrorTree(nodes)
    if errors.is_empty:
        logger.debug(f"Schema '{schema.name}': record is valid")
        return RecordResult.success(ValidatedRecord(values), schema.field_names)

    logger.debug(
        f"Schema '{schema.name}': invalid fields {', '.join(errors.failing_fields)}"
    )
    return RecordResult.failure(errors)
