"""Turning form input into a candidate record.

Forms differ only in *when* they assemble a candidate record: on every
change, once from the submitted form data, or by reading pre-bound field
handles at submit time. Each way is a :class:`CandidateSource`, and
:func:`collect_candidate` reads any of them into the same plain dict.

Checkbox fields always collect as a bool, whichever source they come from.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from .product import PRODUCT_FIELDS

DEFAULT_CHECKBOX_FIELDS = frozenset({"is_featured"})


class CandidateSource(Protocol):
    """Anything that can report the current raw value of a field."""

    def read(self, name: str) -> Any:
        """Return the raw value of a field, or None if it has none."""
        ...


def collect_candidate(
    source: CandidateSource,
    field_names: Iterable[str] = PRODUCT_FIELDS,
) -> dict[str, Any]:
    """Read each named field from a source into a candidate record."""
    return {name: source.read(name) for name in field_names}


@dataclass(frozen=True)
class FieldEvent:
    """A change event from one form control.

    Attributes:
        name: Field name the control is bound to
        value: Control value (text inputs, text areas, selects)
        kind: Control type, e.g. ``text``, ``textarea``, ``select``, ``checkbox``
        checked: Checked state, used for checkboxes instead of ``value``
    """

    name: str
    value: Any = None
    kind: str = "text"
    checked: bool = False

    @property
    def current(self) -> Any:
        return self.checked if self.kind == "checkbox" else self.value


class EventSource:
    """Candidate source kept current by change events (reactive forms)."""

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        checkbox_fields: Iterable[str] = DEFAULT_CHECKBOX_FIELDS,
    ):
        self._values: dict[str, Any] = dict(initial or {})
        self._checkboxes = frozenset(checkbox_fields)

    def apply(self, event: FieldEvent) -> None:
        self._values[event.name] = event.current

    def read(self, name: str) -> Any:
        if name in self._checkboxes:
            return bool(self._values.get(name, False))
        return self._values.get(name)


class FormDataSource:
    """Candidate source over submitted form data (snapshot forms).

    Browsers leave unchecked checkboxes out of submitted data, so a checkbox
    field reads True when its name is present and False otherwise.
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        checkbox_fields: Iterable[str] = DEFAULT_CHECKBOX_FIELDS,
    ):
        self._data = data
        self._checkboxes = frozenset(checkbox_fields)

    def read(self, name: str) -> Any:
        if name in self._checkboxes:
            return name in self._data
        return self._data.get(name)


class HandleSource:
    """Candidate source over pre-bound field handles.

    A handle is a zero-argument callable returning the control's current
    value; checkbox handles return the checked state.
    """

    def __init__(
        self,
        handles: Mapping[str, Callable[[], Any]] | None = None,
        checkbox_fields: Iterable[str] = DEFAULT_CHECKBOX_FIELDS,
    ):
        self._handles: dict[str, Callable[[], Any]] = dict(handles or {})
        self._checkboxes = frozenset(checkbox_fields)

    def bind(self, name: str, handle: Callable[[], Any]) -> None:
        self._handles[name] = handle

    def read(self, name: str) -> Any:
        handle = self._handles.get(name)
        if handle is None:
            return False if name in self._checkboxes else None
        value = handle()
        return bool(value) if name in self._checkboxes else value
