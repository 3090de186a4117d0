"""The product record schema shared by the three product forms.

Fields, in display order: name, description, price, category, is_featured.
The snapshot form's schema leaves out the upper length bounds on name and
description; otherwise the variants are identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .validation import (
    Coercion,
    FieldSchema,
    FieldType,
    RecordSchema,
    ValidatedRecord,
    coerce,
    max_length,
    min_length,
    min_value,
    predicate,
    required,
)

PRODUCT_FIELDS = ("name", "description", "price", "category", "is_featured")

UNCATEGORISED = "uncategorised"

NAME_MIN_LENGTH = 5
NAME_MAX_LENGTH = 50
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 150
PRICE_MIN = 0


def is_categorised(value: Any) -> bool:
    """Reject the placeholder category option."""
    return value != UNCATEGORISED


def product_schema(upper_bounds: bool = True) -> RecordSchema:
    """Build the product record schema.

    Args:
        upper_bounds: Include the maximum length constraints on name and
            description

    Returns:
        RecordSchema named ``product`` (or ``product_snapshot`` without upper
        bounds)
    """
    name_constraints = [
        required("Name is required"),
        coerce(Coercion.TRIM, "Name must be a string"),
        min_length(NAME_MIN_LENGTH, f"Name must be more than {NAME_MIN_LENGTH} characters"),
    ]
    description_constraints = [
        required("Description is required"),
        coerce(Coercion.TRIM, "Description must be a string"),
        min_length(
            DESCRIPTION_MIN_LENGTH,
            f"Description must be more than {DESCRIPTION_MIN_LENGTH} characters",
        ),
    ]
    if upper_bounds:
        name_constraints.append(
            max_length(NAME_MAX_LENGTH, f"Name must be less than {NAME_MAX_LENGTH} characters")
        )
        description_constraints.append(
            max_length(
                DESCRIPTION_MAX_LENGTH,
                f"Description must be less than {DESCRIPTION_MAX_LENGTH} characters",
            )
        )

    return RecordSchema(
        "product" if upper_bounds else "product_snapshot",
        [
            FieldSchema("name", name_constraints, FieldType.STRING, "Product name"),
            FieldSchema(
                "description", description_constraints, FieldType.STRING, "Product description"
            ),
            FieldSchema(
                "price",
                [
                    required("Price is required"),
                    coerce(Coercion.NUMBER, "Price must be a number"),
                    min_value(PRICE_MIN, "Price should be more than 0"),
                ],
                FieldType.NUMBER,
                "Unit price",
            ),
            FieldSchema(
                "category",
                [
                    required("Category is required"),
                    coerce(Coercion.TRIM, "Category must be a string"),
                    predicate(is_categorised, "Choose category other than uncategorised"),
                ],
                FieldType.STRING,
                "Product category",
            ),
            FieldSchema(
                "is_featured",
                [coerce(Coercion.BOOLEAN, "Featured must be a boolean")],
                FieldType.BOOLEAN,
                "Show on the featured list",
            ),
        ],
        description="New product form",
    )


PRODUCT_SCHEMA = product_schema()
SNAPSHOT_PRODUCT_SCHEMA = product_schema(upper_bounds=False)


@dataclass(frozen=True)
class ProductRecord:
    """Typed view of a validated product record."""

    name: str
    description: str
    price: float
    category: str
    is_featured: bool

    @classmethod
    def from_validated(cls, record: ValidatedRecord) -> ProductRecord:
        return cls(**{name: record[name] for name in PRODUCT_FIELDS})

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in PRODUCT_FIELDS}
