"""Type coercion with predictable, consistent behavior.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from .result import ValidationResult


class Coercion(Enum):
    """Coercions a field can declare.

    Attributes:
        TRIM: Value must be a string; surrounding whitespace is stripped
        NUMBER: String or number converted to a float
        BOOLEAN: Any value converted to a bool; never fails
    """

    TRIM = "trim"
    NUMBER = "number"
    BOOLEAN = "boolean"


class Coercer:
    """Type coercion with predictable results.

    Always returns ValidationResult, never raises exceptions. A failed
    coercion carries the raw value and a generic reason; the engine replaces
    the reason with the message declared on the field's coerce constraint.

    ``None`` is passed through untouched by every coercion except BOOLEAN so
    that a ``required`` constraint can report the missing value itself.
    """

    def coerce(self, value: Any, coercion: Coercion) -> ValidationResult:
        """Coerce a value.

        Args:
            value: Raw value to coerce
            coercion: Coercion to apply

        Returns:
            ValidationResult with coerced value or error
        """
        if coercion is Coercion.BOOLEAN:
            return ValidationResult.success(self._to_boolean(value))

        if value is None:
            return ValidationResult.success(None)

        try:
            if coercion is Coercion.TRIM:
                return ValidationResult.success(self._to_trimmed(value))
            return ValidationResult.success(self._to_number(value))
        except (TypeError, ValueError, OverflowError) as e:
            return ValidationResult.failure(value, [str(e)])

    def _to_trimmed(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError(f"Expected string, got {type(value).__name__}")
        return value.strip()

    def _to_number(self, value: Any) -> float | None:
        if isinstance(value, bool):
            return 1.0 if value else 0.0

        if isinstance(value, str):
            value = value.strip()
            if not value:
                # Blank input is a missing value, not a coercion failure
                return None
            if "_" in value:
                raise ValueError(f"Invalid number: {value!r}")
            number = float(value)
        elif isinstance(value, (int, float)):
            number = float(value)
        else:
            raise TypeError(f"Cannot coerce {type(value).__name__} to number")

        if not math.isfinite(number):
            raise ValueError(f"Number {value!r} is not finite")
        return number

    def _to_boolean(self, value: Any) -> bool:
        try:
            return bool(value)
        except (TypeError, ValueError):
            # Present but with no truth value (e.g. an array): treat as checked
            return True
