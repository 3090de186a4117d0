"""Constraint records and the checks that interpret them.

A constraint is plain data: a kind, a parameter and a message. The engine
looks up the check for a kind in :data:`CHECKS`, so a schema never depends on
any particular validation library's API.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from numbers import Number
from typing import Any

from .coercer import Coercion

logger = logging.getLogger(__name__)


class ConstraintKind(Enum):
    """Kinds of constraint a field can declare."""

    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN_VALUE = "minValue"
    MAX_VALUE = "maxValue"
    PREDICATE = "predicate"
    COERCE = "coerce"

    @property
    def is_bound(self) -> bool:
        return self in _BOUNDS

    @classmethod
    def parse(cls, text: str) -> ConstraintKind:
        """Look up a kind by its value (``"minLength"``) or name (``"MIN_LENGTH"``).

        Raises:
            ValueError: If the text names no kind
        """
        for kind in cls:
            if text == kind.value or text.upper() == kind.name:
                return kind
        raise ValueError(f"Unknown constraint kind: {text}")


_BOUNDS = frozenset({
    ConstraintKind.MIN_LENGTH,
    ConstraintKind.MAX_LENGTH,
    ConstraintKind.MIN_VALUE,
    ConstraintKind.MAX_VALUE,
})


@dataclass(frozen=True)
class FieldConstraint:
    """One checkable rule on a single field.

    Attributes:
        kind: What the constraint checks
        parameter: Bound for length/value kinds, a callable for PREDICATE,
            a :class:`Coercion` for COERCE, unused for REQUIRED
        message: Message reported when the constraint fails
    """

    kind: ConstraintKind
    parameter: Any
    message: str

    def describe(self) -> str:
        """Short text form, e.g. ``minLength(5)``."""
        if self.kind is ConstraintKind.REQUIRED:
            return self.kind.value
        if self.kind is ConstraintKind.COERCE:
            return f"coerce({self.parameter.value})"
        if self.kind is ConstraintKind.PREDICATE:
            return f"predicate({predicate_name(self.parameter)})"
        return f"{self.kind.value}({self.parameter})"


def required(message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.REQUIRED, None, message)


def min_length(bound: int, message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.MIN_LENGTH, bound, message)


def max_length(bound: int, message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.MAX_LENGTH, bound, message)


def min_value(bound: float, message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.MIN_VALUE, bound, message)


def max_value(bound: float, message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.MAX_VALUE, bound, message)


def predicate(check: Callable[[Any], bool], message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.PREDICATE, check, message)


def coerce(coercion: Coercion, message: str) -> FieldConstraint:
    return FieldConstraint(ConstraintKind.COERCE, coercion, message)


def predicate_name(check: Callable[[Any], bool]) -> str:
    """Readable name of a predicate callable, for schema descriptions."""
    return getattr(check, "__name__", type(check).__name__)


def is_missing(value: Any) -> bool:
    """True for None and for strings with no significant characters."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


# ---------------------------------------------------------------------------
# Checks. Each returns True when the value satisfies the constraint.
# Bound checks accept values of the wrong type: those are the job of the
# field's coercion, which runs first.
# ---------------------------------------------------------------------------

def _check_required(value: Any, parameter: Any) -> bool:
    return not is_missing(value)


def _check_min_length(value: Any, parameter: int) -> bool:
    if not hasattr(value, "__len__"):
        return True
    return len(value) >= parameter


def _check_max_length(value: Any, parameter: int) -> bool:
    if not hasattr(value, "__len__"):
        return True
    return len(value) <= parameter


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _check_min_value(value: Any, parameter: float) -> bool:
    if not _is_number(value):
        return True
    return float(value) >= float(parameter)


def _check_max_value(value: Any, parameter: float) -> bool:
    if not _is_number(value):
        return True
    return float(value) <= float(parameter)


def _check_predicate(value: Any, parameter: Callable[[Any], bool]) -> bool:
    try:
        return bool(parameter(value))
    except Exception as e:
        # A raising predicate counts as a failed predicate
        logger.debug(f"Predicate {predicate_name(parameter)} raised: {e!s}")
        return False


CHECKS: dict[ConstraintKind, Callable[[Any, Any], bool]] = {
    ConstraintKind.REQUIRED: _check_required,
    ConstraintKind.MIN_LENGTH: _check_min_length,
    ConstraintKind.MAX_LENGTH: _check_max_length,
    ConstraintKind.MIN_VALUE: _check_min_value,
    ConstraintKind.MAX_VALUE: _check_max_value,
    ConstraintKind.PREDICATE: _check_predicate,
}


def check(constraint: FieldConstraint, value: Any) -> bool:
    """Evaluate a non-coerce constraint against an already-coerced value.

    Missing values satisfy every constraint except REQUIRED, so that a
    missing field reports only its "required" message.
    """
    if constraint.kind is not ConstraintKind.REQUIRED and is_missing(value):
        return True
    return CHECKS[constraint.kind](value, constraint.parameter)
