"""Configuration loading for schema definition files.

Schema definitions live in YAML (or JSON) files. Values may reference
environment variables:

- ``${VAR}`` - replaced with VAR, error if not set
- ``${VAR:default}`` / ``${VAR:-default}`` - VAR, or the default if not set

A value that is exactly one reference is converted to int/float/bool where
possible, so ``max: ${NAME_MAX:50}`` yields the integer 50.
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .exceptions import ConfigNotFoundError, ConfigurationError

logger = logging.getLogger(__name__)

SCHEMA_ENV_VAR = "FORMKNOBS_SCHEMA"


class VariableSubstitution:
    """Handles environment variable substitution in configuration values."""

    VAR_PATTERN = re.compile(r'\$\{([^}:]+)(?::(-)?([^}]*))?\}')

    def substitute(self, value: Any) -> Any:
        """Recursively substitute environment variables in a value.

        Args:
            value: Value to process (can be string, dict, list, or other)

        Returns:
            Value with environment variables substituted

        Raises:
            ValueError: If a required environment variable is not found
        """
        if isinstance(value, str):
            return self._substitute_string(value)
        elif isinstance(value, dict):
            # Keys are not substituted, only values
            return {key: self.substitute(item) for key, item in value.items()}
        elif isinstance(value, list):
            return [self.substitute(item) for item in value]
        else:
            return value

    def _substitute_string(self, text: str) -> Union[str, int, float, bool]:
        # A single whole-string reference can yield a non-string type
        match = self.VAR_PATTERN.fullmatch(text)
        if match:
            return self._convert_type(self._resolve(match))

        return self.VAR_PATTERN.sub(self._resolve, text)

    def _resolve(self, match: re.Match) -> str:
        var_name = match.group(1)
        has_default = match.group(2) is not None or match.group(3) is not None

        if var_name in os.environ:
            return os.environ[var_name]
        elif has_default:
            return match.group(3) or ""
        raise ValueError(f"Environment variable '{var_name}' not found")

    def _convert_type(self, value: str) -> Union[str, int, float, bool]:
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value


def load_config(path: Union[str, Path], substitute: bool = True) -> Dict[str, Any]:
    """Load a configuration file into a dictionary.

    Args:
        path: Path to a .yaml, .yml or .json file
        substitute: Whether to apply environment variable substitution

    Returns:
        Configuration dictionary (empty for an empty file)

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigurationError: If the file cannot be parsed or has the wrong shape
    """
    path = Path(path).resolve()
    if not path.exists():
        raise ConfigNotFoundError(str(path))

    suffix = path.suffix.lower()
    try:
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported file format: {suffix}",
                    context={"path": str(path)},
                )
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot parse {path.name}: {e!s}",
            context={"path": str(path)},
        ) from e

    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration in {path.name} must be a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )

    if substitute:
        try:
            data = VariableSubstitution().substitute(data)
        except ValueError as e:
            raise ConfigurationError(str(e), context={"path": str(path)}) from e

    logger.debug(f"Loaded configuration from {path}")
    return data


class FactoryBase:
    """Base class for factory objects.

    Factories that inherit from this should implement the create method.
    """

    def create(self, **config: Any) -> Any:
        """Create an object from configuration.

        Args:
            **config: Configuration parameters

        Returns:
            Created object
        """
        raise NotImplementedError("Subclasses must implement create method")

