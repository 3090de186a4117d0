"""Form controllers for the three ways of collecting a product record.

All three share one schema and one engine and differ only in when they
assemble the candidate record:

- :class:`ReactiveForm` re-validates after every change event and shows a
  field's errors once the field has been touched.
- :class:`SnapshotForm` validates once per submission, from the submitted
  form data, and shows every error after the first attempt.
- :class:`HandleForm` reads pre-bound field handles at submission and gates
  display by touched fields like the reactive form.

"Submitting" hands the validated record to a callback. The default callback
only logs it; where a record really goes is up to the application.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .collect import EventSource, FieldEvent, FormDataSource, HandleSource, collect_candidate
from .product import PRODUCT_SCHEMA, SNAPSHOT_PRODUCT_SCHEMA, ProductRecord
from .touched import TouchedFields, visible_errors
from .validation import ErrorTree, RecordResult, RecordSchema, ValidatedRecord, validate

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[Any], None]
RecordConverter = Callable[[ValidatedRecord], Any]


def log_submission(record: ProductRecord | ValidatedRecord) -> None:
    """Default submit callback: log the submitted record."""
    logger.info(f"Submitted record: {record.to_dict()}")


class BaseForm:
    """Shared state and submission flow for the form controllers.

    Args:
        schema: Record schema to validate against (the variant's default if None)
        on_submit: Called with the submitted record after a successful submission
        to_record: Converts the validated record before it is handed to
            on_submit. Forms on their default product schema hand over a
            ProductRecord; with another schema the ValidatedRecord is passed
            as is unless a converter is given.
    """

    default_schema: RecordSchema = PRODUCT_SCHEMA

    def __init__(
        self,
        schema: RecordSchema | None = None,
        on_submit: SubmitCallback | None = None,
        to_record: RecordConverter | None = None,
    ):
        if to_record is None and schema is None:
            to_record = ProductRecord.from_validated
        self.schema = schema if schema is not None else self.default_schema
        self.on_submit = on_submit or log_submission
        self.to_record = to_record
        self.touched = TouchedFields()
        self.last_result: RecordResult | None = None
        self.submissions = 0

    @property
    def errors(self) -> ErrorTree:
        """Full error tree of the latest validation (empty before any)."""
        if self.last_result is None:
            return ErrorTree.empty(self.schema.field_names)
        return self.last_result.errors

    @property
    def visible_errors(self) -> ErrorTree:
        """Error tree gated by the touched fields."""
        return visible_errors(self.errors, self.touched)

    def _validate(self, candidate: Mapping[str, Any]) -> RecordResult:
        self.last_result = validate(self.schema, candidate)
        return self.last_result

    def _submit(self, candidate: Mapping[str, Any]) -> RecordResult:
        result = self._validate(candidate)
        if not result.valid:
            logger.debug(
                f"{type(self).__name__}: submission rejected, "
                f"invalid fields {', '.join(result.errors.failing_fields)}"
            )
            return result

        record = result.record
        self.on_submit(self.to_record(record) if self.to_record else record)
        self.submissions += 1
        return result


class ReactiveForm(BaseForm):
    """Form that keeps its candidate record current on every change.

    Args:
        schema: Record schema (defaults to the full product schema)
        on_submit: Submit callback
        initial: Initial field values
        to_record: Converter applied before on_submit
    """

    def __init__(
        self,
        schema: RecordSchema | None = None,
        on_submit: SubmitCallback | None = None,
        initial: Mapping[str, Any] | None = None,
        to_record: RecordConverter | None = None,
    ):
        super().__init__(schema, on_submit, to_record)
        self.source = EventSource(initial)
        self._validate(self.candidate)

    @property
    def candidate(self) -> dict[str, Any]:
        return collect_candidate(self.source, self.schema.field_names)

    def change(self, event: FieldEvent) -> RecordResult:
        """Apply a change event, touch its field and re-validate."""
        self.touched.touch(event.name)
        self.source.apply(event)
        return self._validate(self.candidate)

    def submit(self) -> RecordResult:
        """Submit the current values; a successful submission ends the session."""
        result = self._submit(self.candidate)
        if result.valid:
            self.touched.reset()
        return result


class SnapshotForm(BaseForm):
    """Form that validates only the data submitted with it."""

    default_schema = SNAPSHOT_PRODUCT_SCHEMA

    def submit(self, form_data: Mapping[str, Any]) -> RecordResult:
        """Collect the submitted data, validate it once and show all errors."""
        candidate = collect_candidate(FormDataSource(form_data), self.schema.field_names)
        self.touched.touch_all(self.schema.field_names)
        return self._submit(candidate)


class HandleForm(BaseForm):
    """Form that reads field values through pre-bound handles at submission."""

    def __init__(
        self,
        schema: RecordSchema | None = None,
        on_submit: SubmitCallback | None = None,
        to_record: RecordConverter | None = None,
    ):
        super().__init__(schema, on_submit, to_record)
        self.source = HandleSource()

    def bind(self, name: str, handle: Callable[[], Any]) -> None:
        """Bind a handle returning the current value of a field."""
        self.source.bind(name, handle)

    def touch(self, name: str) -> None:
        """Record an interaction with a field."""
        self.touched.touch(name)

    def submit(self) -> RecordResult:
        result = self._submit(collect_candidate(self.source, self.schema.field_names))
        if result.valid:
            self.touched.reset()
        return result
