"""
Tests for the validation engine building blocks: results, coercion,
constraints, schemas and the evaluator.
"""

import math
import threading

import pytest

from formknobs.exceptions import SchemaError
from formknobs.validation import (
    Coercer,
    Coercion,
    ConstraintKind,
    ErrorTree,
    FieldConstraint,
    FieldErrors,
    FieldSchema,
    FieldType,
    RecordResult,
    RecordSchema,
    ValidatedRecord,
    ValidationResult,
    coerce,
    max_length,
    max_value,
    min_length,
    min_value,
    predicate,
    required,
    validate,
    validate_field,
)
from formknobs.validation.constraints import check, is_missing


def simple_schema():
    return RecordSchema("simple", [
        FieldSchema("title", [
            required("Title is required"),
            coerce(Coercion.TRIM, "Title must be a string"),
            min_length(3, "Title too short"),
            predicate(lambda v: not v.isdigit(), "Title cannot be only digits"),
        ]),
        FieldSchema("quantity", [
            coerce(Coercion.NUMBER, "Quantity must be a number"),
            min_value(1, "Quantity too small"),
            max_value(10, "Quantity too large"),
        ], FieldType.NUMBER),
        FieldSchema("gift", [coerce(Coercion.BOOLEAN, "Gift must be a boolean")], FieldType.BOOLEAN),
    ])


class TestValidationResult:
    """Test the field-level ValidationResult."""

    def test_success_result(self):
        result = ValidationResult.success(42)
        assert result.valid is True
        assert result.value == 42
        assert result.errors == []
        assert bool(result) is True

    def test_failure_result(self):
        result = ValidationResult.failure("invalid", ["Error 1", "Error 2"])
        assert result.valid is False
        assert result.errors == ["Error 1", "Error 2"]
        assert bool(result) is False

    def test_add_error(self):
        result = ValidationResult.success(5)
        result.add_error("Something went wrong").add_error("And again")
        assert result.valid is False
        assert result.errors == ["Something went wrong", "And again"]


class TestErrorTree:
    """Test the error tree and record result types."""

    def test_empty_tree_is_total(self):
        tree = ErrorTree.empty(["a", "b"])
        assert list(tree) == ["a", "b"]
        assert tree.is_empty
        assert tree["a"] == FieldErrors()
        assert tree.failing_fields == ()

    def test_flatten_and_format(self):
        tree = ErrorTree({"a": ["one", "two"], "b": []})
        assert tree.flatten() == {"a": ["one", "two"], "b": []}
        assert tree.format() == {
            "_errors": [],
            "a": {"_errors": ["one", "two"]},
            "b": {"_errors": []},
        }
        assert tree.failing_fields == ("a",)
        assert tree.messages("a") == ("one", "two")
        assert tree.messages("missing") == ()

    def test_tree_equality(self):
        assert ErrorTree({"a": ["x"]}) == ErrorTree({"a": FieldErrors(("x",))})
        assert ErrorTree({"a": ["x"]}) != ErrorTree({"a": ["y"]})

    def test_validated_record_is_read_only(self):
        record = ValidatedRecord({"a": 1, "b": True})
        assert record["a"] == 1
        assert list(record) == ["a", "b"]
        assert record.to_dict() == {"a": 1, "b": True}
        with pytest.raises(TypeError):
            record["a"] = 2  # type: ignore[index]

    def test_record_result_shapes(self):
        ok = RecordResult.success(ValidatedRecord({"a": 1}), ["a"])
        assert ok and ok.value["a"] == 1 and ok.errors.is_empty
        failed = RecordResult.failure(ErrorTree({"a": ["bad"]}))
        assert not failed and failed.value is None

    def test_record_accessor(self):
        ok = RecordResult.success(ValidatedRecord({"a": 1}), ["a"])
        assert ok.record is ok.value
        failed = RecordResult.failure(ErrorTree({"a": ["bad"]}))
        with pytest.raises(ValueError):
            failed.record


class TestCoercer:
    """Test coercions."""

    def test_trim(self):
        coercer = Coercer()
        assert coercer.coerce("  abc  ", Coercion.TRIM).value == "abc"
        assert coercer.coerce(None, Coercion.TRIM).value is None
        result = coercer.coerce(123, Coercion.TRIM)
        assert not result.valid
        assert "Expected string" in result.errors[0]

    def test_number(self):
        coercer = Coercer()
        assert coercer.coerce("19.99", Coercion.NUMBER).value == 19.99
        assert coercer.coerce(" 7 ", Coercion.NUMBER).value == 7.0
        assert coercer.coerce(3, Coercion.NUMBER).value == 3.0
        assert coercer.coerce(True, Coercion.NUMBER).value == 1.0
        assert coercer.coerce("", Coercion.NUMBER).value is None
        assert coercer.coerce("   ", Coercion.NUMBER).valid

    @pytest.mark.parametrize("raw", [
        "abc", "1,5", "1_000", "nan", "inf", "1e999", 10**400, -10**400, [1], {"a": 1},
    ])
    def test_number_failures(self, raw):
        assert not Coercer().coerce(raw, Coercion.NUMBER).valid

    @pytest.mark.parametrize("raw,expected", [
        ("on", True),
        ("true", True),
        ("yes", True),
        (True, True),
        (1, True),
        (None, False),
        ("", False),
        ("off", True),
        ("false", True),
        ("0", True),
        ("   ", True),
        (False, False),
        (0, False),
    ])
    def test_boolean(self, raw, expected):
        result = Coercer().coerce(raw, Coercion.BOOLEAN)
        assert result.valid
        assert result.value is expected

    def test_boolean_without_truth_value(self):
        class Ambiguous:
            def __bool__(self):
                raise ValueError("ambiguous")

        assert Coercer().coerce(Ambiguous(), Coercion.BOOLEAN).value is True


class TestConstraints:
    """Test individual constraint checks."""

    def test_is_missing(self):
        assert is_missing(None)
        assert is_missing("")
        assert is_missing("   ")
        assert not is_missing(0)
        assert not is_missing(False)
        assert not is_missing("x")

    def test_required(self):
        constraint = required("needed")
        assert not check(constraint, None)
        assert not check(constraint, "  ")
        assert check(constraint, 0)

    def test_bounds_skip_missing_values(self):
        assert check(min_length(5, "short"), None)
        assert check(min_value(1, "small"), None)

    def test_length_bounds(self):
        assert check(min_length(2, "short"), "ab")
        assert not check(min_length(2, "short"), "a")
        assert check(max_length(3, "long"), "abc")
        assert not check(max_length(3, "long"), "abcd")

    def test_value_bounds_are_inclusive(self):
        assert check(min_value(0, "neg"), 0.0)
        assert not check(min_value(0, "neg"), -0.01)
        assert check(max_value(10, "big"), 10)
        assert not check(max_value(10, "big"), 10.5)

    def test_value_bounds_ignore_non_numbers(self):
        assert check(min_value(0, "neg"), "abc")

    def test_raising_predicate_fails(self):
        def explode(value):
            raise RuntimeError("boom")

        assert not check(predicate(explode, "bad"), "x")

    def test_kind_parse(self):
        assert ConstraintKind.parse("minLength") is ConstraintKind.MIN_LENGTH
        assert ConstraintKind.parse("MIN_LENGTH") is ConstraintKind.MIN_LENGTH
        with pytest.raises(ValueError):
            ConstraintKind.parse("between")

    def test_describe(self):
        assert min_length(5, "m").describe() == "minLength(5)"
        assert coerce(Coercion.NUMBER, "m").describe() == "coerce(number)"
        assert required("m").describe() == "required"


class TestFieldSchema:
    """Test field declaration rules."""

    def test_coercion_after_bound_rejected(self):
        with pytest.raises(SchemaError) as exc_info:
            FieldSchema("price", [
                min_value(0, "negative"),
                coerce(Coercion.NUMBER, "not a number"),
            ], FieldType.NUMBER)
        assert exc_info.value.context["field"] == "price"

    def test_coercion_after_predicate_rejected(self):
        with pytest.raises(SchemaError):
            FieldSchema("name", [
                predicate(bool, "empty"),
                coerce(Coercion.TRIM, "not a string"),
            ])

    def test_two_coercions_rejected(self):
        with pytest.raises(SchemaError):
            FieldSchema("name", [
                coerce(Coercion.TRIM, "a"),
                coerce(Coercion.TRIM, "b"),
            ])

    def test_coercion_must_match_type(self):
        with pytest.raises(SchemaError):
            FieldSchema("price", [coerce(Coercion.TRIM, "a")], FieldType.NUMBER)

    def test_number_field_needs_coercion(self):
        with pytest.raises(SchemaError):
            FieldSchema("price", [min_value(0, "negative")], FieldType.NUMBER)

    def test_bound_needs_number(self):
        with pytest.raises(SchemaError):
            FieldSchema("name", [FieldConstraint(ConstraintKind.MIN_LENGTH, "5", "short")])

    def test_predicate_needs_callable(self):
        with pytest.raises(SchemaError):
            FieldSchema("name", [FieldConstraint(ConstraintKind.PREDICATE, "x", "bad")])

    def test_required_before_coercion_allowed(self):
        field_schema = FieldSchema("price", [
            required("needed"),
            coerce(Coercion.NUMBER, "not a number"),
        ], FieldType.NUMBER)
        assert field_schema.coercion is Coercion.NUMBER
        assert isinstance(field_schema.constraints, tuple)


class TestRecordSchema:
    """Test record schema structure."""

    def test_duplicate_fields_rejected(self):
        with pytest.raises(SchemaError):
            RecordSchema("dup", [FieldSchema("a"), FieldSchema("a")])

    def test_order_and_mapping(self):
        schema = simple_schema()
        assert schema.field_names == ("title", "quantity", "gift")
        assert "title" in schema
        assert len(schema) == 3
        assert schema["quantity"].output_type is FieldType.NUMBER

    def test_immutable(self):
        schema = simple_schema()
        with pytest.raises(AttributeError):
            schema.name = "other"

    def test_to_dict(self):
        data = simple_schema().to_dict()
        assert data["name"] == "simple"
        assert [f["name"] for f in data["fields"]] == ["title", "quantity", "gift"]
        title = data["fields"][0]
        assert title["constraints"][2] == {
            "kind": "minLength", "rule": "minLength(3)", "message": "Title too short",
        }


class TestEngine:
    """Test the evaluator against a small schema."""

    def test_valid_record(self):
        result = validate(simple_schema(), {"title": " Book ", "quantity": "3", "gift": "on"})
        assert result.valid
        assert result.value.to_dict() == {"title": "Book", "quantity": 3.0, "gift": True}

    def test_missing_keys(self):
        result = validate(simple_schema(), {})
        assert not result.valid
        assert result.errors.flatten() == {
            "title": ["Title is required"],
            "quantity": [],
            "gift": [],
        }

    def test_accumulates_messages(self):
        result = validate(simple_schema(), {"title": "12"})
        assert result.errors["title"].messages == (
            "Title too short",
            "Title cannot be only digits",
        )

    def test_coercion_failure_skips_bounds(self):
        result = validate(simple_schema(), {"title": "Book", "quantity": "lots"})
        assert result.errors.messages("quantity") == ("Quantity must be a number",)

    def test_upper_bound(self):
        result = validate(simple_schema(), {"title": "Book", "quantity": 11})
        assert result.errors.messages("quantity") == ("Quantity too large",)

    def test_extra_keys_ignored(self):
        result = validate(simple_schema(), {"title": "Book", "unknown": object()})
        assert result.valid
        assert "unknown" not in result.value

    @pytest.mark.parametrize("candidate", [None, 42, "text", ["title"], object()])
    def test_non_mapping_candidate(self, candidate):
        result = validate(simple_schema(), candidate)
        assert not result.valid
        assert set(result.errors) == {"title", "quantity", "gift"}

    def test_schema_validate_shorthand(self):
        schema = simple_schema()
        assert schema.validate({"title": "Book"}) == validate(schema, {"title": "Book"})

    def test_validate_field(self):
        result = validate_field(simple_schema()["quantity"], "0")
        assert not result.valid
        assert result.value == 0.0
        assert result.errors == ["Quantity too small"]

    def test_nan_never_passes_bounds(self):
        result = validate(simple_schema(), {"title": "Book", "quantity": math.nan})
        assert result.errors.messages("quantity") == ("Quantity must be a number",)

    def test_debug_logging(self, caplog):
        with caplog.at_level("DEBUG", logger="formknobs.validation.engine"):
            validate(simple_schema(), {})
        assert "invalid fields title" in caplog.text

    def test_concurrent_use_of_one_schema(self):
        schema = simple_schema()
        results = []

        def worker(n):
            results.append(validate(schema, {"title": f"Item {n}", "quantity": n % 12}))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(24)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 24
        assert sum(1 for r in results if r.valid) == 20  # quantities 1..10
