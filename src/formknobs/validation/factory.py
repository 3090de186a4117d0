"""Factory for building record schemas from configuration."""

import logging
from pathlib import Path
from typing import Any, Union

from formknobs.config import FactoryBase, load_config
from formknobs.exceptions import ConfigurationError, SchemaError

from .coercer import Coercion
from .constraints import ConstraintKind, FieldConstraint
from .predicates import PredicateRegistry, predicate_registry
from .schema import FieldSchema, FieldType, RecordSchema

logger = logging.getLogger(__name__)


class SchemaFactory(FactoryBase):
    """Factory for creating record schemas from configuration.

    Configuration Options:
        name (str): Schema name
        description (str): Optional schema description
        fields (list): List of field definitions, in display order

    Field Definition Options:
        name (str): Field name
        type (str): Output type (string, number, boolean; default string)
        description (str): Field description
        constraints (list): Constraint definitions, in evaluation order

    Constraint Definition Options:
        kind (str): required, minLength, maxLength, minValue, maxValue,
            predicate or coerce
        parameter: Bound, coercion name (trim, number, boolean), or for
            predicates a one-entry mapping ``{predicate_name: argument}``
        message (str): Message reported on failure

    Example Configuration:
        name: product
        fields:
          - name: price
            type: number
            constraints:
              - kind: required
                message: Price is required
              - kind: coerce
                parameter: number
                message: Price must be a number
              - kind: minValue
                parameter: 0
                message: Price should be more than 0
    """

    def __init__(self, predicates: PredicateRegistry | None = None):
        self._predicates = predicates or predicate_registry

    def create(self, **config) -> RecordSchema:
        """Create a RecordSchema from configuration.

        Raises:
            ConfigurationError: If the configuration does not describe a
                valid schema
        """
        name = config.get("name", "unnamed_schema")
        description = config.get("description")

        logger.info(f"Creating schema: {name}")

        field_configs = config.get("fields", [])
        if not isinstance(field_configs, list):
            raise ConfigurationError(
                f"Schema '{name}': 'fields' must be a list",
                context={"schema": name},
            )

        fields = [self._build_field(name, field_config) for field_config in field_configs]
        try:
            return RecordSchema(name, fields, description=description)
        except SchemaError as e:
            raise ConfigurationError(str(e), context=e.context) from e

    def _build_field(self, schema_name: str, field_config: Any) -> FieldSchema:
        if not isinstance(field_config, dict) or not field_config.get("name"):
            raise ConfigurationError(
                f"Schema '{schema_name}': every field needs a 'name'",
                context={"schema": schema_name, "field": field_config},
            )
        field_name = field_config["name"]
        context = {"schema": schema_name, "field": field_name}

        try:
            output_type = FieldType.parse(str(field_config.get("type", "string")))
        except ValueError as e:
            raise ConfigurationError(str(e), context=context) from e

        constraints = [
            self._build_constraint(item, context)
            for item in field_config.get("constraints") or []
        ]

        try:
            return FieldSchema(
                name=field_name,
                constraints=tuple(constraints),
                output_type=output_type,
                description=field_config.get("description"),
            )
        except SchemaError as e:
            raise ConfigurationError(str(e), context={**context, **e.context}) from e

    def _build_constraint(self, config: Any, context: dict[str, Any]) -> FieldConstraint:
        if not isinstance(config, dict):
            raise ConfigurationError("Constraint definition must be a mapping", context=context)

        try:
            kind = ConstraintKind.parse(str(config.get("kind", "")))
        except ValueError as e:
            raise ConfigurationError(str(e), context=context) from e

        message = config.get("message")
        if not message:
            raise ConfigurationError(
                f"Constraint {kind.value} needs a message",
                context={**context, "kind": kind.value},
            )

        parameter = config.get("parameter")
        if kind is ConstraintKind.COERCE:
            try:
                parameter = Coercion(str(parameter).lower())
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown coercion: {parameter}",
                    context={**context, "kind": kind.value},
                ) from e
        elif kind is ConstraintKind.PREDICATE:
            parameter = self._build_predicate(parameter, context)
        elif kind.is_bound:
            if isinstance(parameter, bool) or not isinstance(parameter, (int, float)):
                raise ConfigurationError(
                    f"Constraint {kind.value} needs a numeric parameter, got {parameter!r}",
                    context={**context, "kind": kind.value},
                )
        elif parameter is not None:
            logger.warning(f"Ignoring parameter of {kind.value} constraint on {context['field']}")
            parameter = None

        return FieldConstraint(kind, parameter, str(message))

    def _build_predicate(self, parameter: Any, context: dict[str, Any]) -> Any:
        if isinstance(parameter, str):
            parameter = {parameter: None}
        if not isinstance(parameter, dict) or len(parameter) != 1:
            raise ConfigurationError(
                "Predicate parameter must be a predicate name or {name: argument}",
                context={**context, "parameter": parameter},
            )
        ((key, argument),) = parameter.items()
        try:
            return self._predicates.build(key, argument)
        except ConfigurationError as e:
            raise ConfigurationError(str(e), context={**context, **e.context}) from e


def load_schema(path: Union[str, Path], factory: SchemaFactory | None = None) -> RecordSchema:
    """Load a record schema from a YAML or JSON definition file."""
    config = load_config(path)
    return (factory or schema_factory).create(**config)


# Singleton instance for registration
schema_factory = SchemaFactory()
