"""Named predicate builders for configuration-driven schemas.

A configuration file cannot hold a callable, so predicate constraints name a
builder and pass it an argument:

```yaml
- kind: predicate
  parameter: {not_equal: uncategorised}
  message: Choose category other than uncategorised
```

Builders are kept in a thread-safe :class:`PredicateRegistry`; applications
can register their own on :data:`predicate_registry`.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable
from typing import Any

from formknobs.exceptions import ConfigurationError

Predicate = Callable[[Any], bool]
PredicateBuilder = Callable[[Any], Predicate]


def not_equal(sentinel: Any) -> Predicate:
    """Reject one specific value, such as a placeholder option."""

    def check(value: Any) -> bool:
        return value != sentinel

    check.__name__ = f"not_equal({sentinel!r})"
    return check


def one_of(allowed: Any) -> Predicate:
    """Accept only values from a fixed collection."""
    if isinstance(allowed, (str, bytes)) or not hasattr(allowed, "__iter__"):
        raise ConfigurationError(
            "one_of needs a list of allowed values",
            context={"allowed": allowed},
        )
    choices = frozenset(allowed)

    def check(value: Any) -> bool:
        return value in choices

    check.__name__ = f"one_of({sorted(map(str, choices))!r})"
    return check


def matches(pattern: str) -> Predicate:
    """Accept strings that fully match a regular expression."""
    try:
        regex = re.compile(pattern)
    except (re.error, TypeError) as e:
        raise ConfigurationError(
            f"Invalid pattern: {e!s}",
            context={"pattern": pattern},
        ) from e

    def check(value: Any) -> bool:
        return isinstance(value, str) and regex.fullmatch(value) is not None

    check.__name__ = f"matches({pattern!r})"
    return check


class PredicateRegistry:
    """Registry of predicate builders by name.

    Args:
        name: Registry name for error context
    """

    def __init__(self, name: str):
        self._name = name
        self._builders: dict[str, PredicateBuilder] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        return self._name

    def register(self, key: str, builder: PredicateBuilder, allow_overwrite: bool = False) -> None:
        """Register a builder under a name.

        Raises:
            ConfigurationError: If the name is taken and allow_overwrite is False
        """
        with self._lock:
            if not allow_overwrite and key in self._builders:
                raise ConfigurationError(
                    f"Predicate '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._builders[key] = builder

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._builders

    def list_keys(self) -> list[str]:
        with self._lock:
            return sorted(self._builders)

    def build(self, key: str, argument: Any) -> Predicate:
        """Build the predicate registered under ``key``.

        Raises:
            ConfigurationError: If no builder has that name
        """
        with self._lock:
            builder = self._builders.get(key)
        if builder is None:
            raise ConfigurationError(
                f"Unknown predicate: {key}",
                context={"key": key, "available": self.list_keys()},
            )
        return builder(argument)


predicate_registry = PredicateRegistry("predicates")
predicate_registry.register("not_equal", not_equal)
predicate_registry.register("one_of", one_of)
predicate_registry.register("matches", matches)
