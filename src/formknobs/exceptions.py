"""Exception hierarchy for formknobs.

Validation failures are never raised: the engine reports them structurally
through :class:`~formknobs.validation.result.RecordResult`. The exceptions
here cover mistakes made by the *author* of a schema or a configuration file,
which are detected when the schema is built.

Example:
    ```python
    from formknobs.exceptions import SchemaError

    try:
        RecordSchema("product", [name_field, name_field])
    except SchemaError as e:
        logger.error(f"Bad schema: {e}")
        logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class FormknobsError(Exception):
    """Base exception for all formknobs errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (field names, kinds, etc.)
        details: Alternative to context (both are supported)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        # Details takes precedence if both are provided
        self.context = details or context or {}
        self.details = self.context


class SchemaError(FormknobsError):
    """Raised when a field or record schema is declared incorrectly.

    Common scenarios include:
    - A coercion declared after a bound or predicate constraint
    - More than one coercion on a field
    - A coercion that disagrees with the field's output type
    - Duplicate field names in a record schema

    Example:
        ```python
        raise SchemaError(
            "Coercion must precede bound constraints",
            context={"field": "price", "position": 2}
        )
        ```
    """

    pass


class ConfigurationError(FormknobsError):
    """Raised when a schema configuration is invalid.

    Use this exception for configuration-related errors including:
    - Unknown constraint kinds or predicate names
    - Missing messages or parameters
    - Unreadable configuration files
    """

    pass


class ConfigNotFoundError(ConfigurationError):
    """Raised when a configuration file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            f"Configuration file not found: {path}",
            context={"path": path},
        )
