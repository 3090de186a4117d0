"""formknobs - declarative record validation for form input.

A record schema lists each field's constraints as plain data; the engine
checks any candidate record against it and returns either a validated,
coerced record or an error tree with one node per field.

Example:
    ```python
    from formknobs import PRODUCT_SCHEMA, validate

    result = validate(PRODUCT_SCHEMA, {"name": "Blue Shirt", "price": "19.99"})
    if not result:
        for name, messages in result.errors.flatten().items():
            print(name, messages)
    ```
"""

from .collect import (
    CandidateSource,
    EventSource,
    FieldEvent,
    FormDataSource,
    HandleSource,
    collect_candidate,
)
from .exceptions import ConfigNotFoundError, ConfigurationError, FormknobsError, SchemaError
from .forms import BaseForm, HandleForm, ReactiveForm, SnapshotForm, log_submission
from .product import (
    PRODUCT_FIELDS,
    PRODUCT_SCHEMA,
    SNAPSHOT_PRODUCT_SCHEMA,
    ProductRecord,
    product_schema,
)
from .touched import TouchedFields, display_set, visible_errors
from .validation import (
    ErrorTree,
    FieldErrors,
    FieldSchema,
    FieldType,
    RecordResult,
    RecordSchema,
    ValidatedRecord,
    load_schema,
    validate,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Engine
    "validate",
    "RecordSchema",
    "FieldSchema",
    "FieldType",
    "RecordResult",
    "ErrorTree",
    "FieldErrors",
    "ValidatedRecord",
    "load_schema",
    # Product schema
    "PRODUCT_FIELDS",
    "PRODUCT_SCHEMA",
    "SNAPSHOT_PRODUCT_SCHEMA",
    "ProductRecord",
    "product_schema",
    # Touched fields
    "TouchedFields",
    "visible_errors",
    "display_set",
    # Collection
    "CandidateSource",
    "FieldEvent",
    "EventSource",
    "FormDataSource",
    "HandleSource",
    "collect_candidate",
    # Forms
    "BaseForm",
    "ReactiveForm",
    "SnapshotForm",
    "HandleForm",
    "log_submission",
    # Exceptions
    "FormknobsError",
    "SchemaError",
    "ConfigurationError",
    "ConfigNotFoundError",
]
