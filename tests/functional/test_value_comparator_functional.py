"""Functional tests for the Value Comparator.

Covers per-family operator semantics, absent-value handling, the matrix
partial-data contract, and the diagnostics raised for operator/type pairs
that have no comparison function.
"""

from __future__ import annotations

import pytest

from formlogic.logic.comparator import compare, supported_operators
from formlogic.logic.diagnostics import (
    INVALID_COMPARISON_VALUE,
    UNSUPPORTED_OPERATOR,
    DiagnosticCollector,
)


# -----------------------------
# Scalar families
# -----------------------------


@pytest.mark.parametrize(
    "operator,submitted,literal,expected",
    [
        ("equals", "hello", "hello", True),
        ("equals", "hello", "Hello", False),
        ("not_equals", "hello", "world", True),
        ("contains", "hello world", "lo w", True),
        ("notContains", "hello world", "xyz", True),
        ("starts_with", "hello", "he", True),
        ("ends_with", "hello", "lo", True),
        ("content_length_greater_than", "hello", 3, True),
        ("content_length_less_than", "hello", 3, False),
        ("content_length_equals", "hello", "5", True),
    ],
)
def test_text_operators(operator, submitted, literal, expected):
    """Verifies text comparisons operate on the canonical string form."""
    assert compare(operator, "text", submitted, literal) is expected


def test_number_equals_coerces_numeric_strings():
    """Verifies numeric strings compare numerically for number fields."""
    assert compare("equals", "number", "10", 10) is True
    assert compare("equals", "number", "10.0", "10") is True
    assert compare("not_equals", "number", 3, "4") is True


def test_ordering_is_false_when_non_comparable():
    """Verifies ordering on garbage or absent values is False rather than an error."""
    diagnostics = DiagnosticCollector()
    assert compare("greater_than", "number", "abc", 1, diagnostics=diagnostics) is False
    assert compare("less_than", "number", None, 1, diagnostics=diagnostics) is False
    assert compare("greater_than", "number", 5, "not a number", diagnostics=diagnostics) is False
    # Non-comparable data is not a definition problem and raises no diagnostic
    assert len(diagnostics) == 0


def test_date_ordering_and_equality():
    """Verifies date comparisons work on calendar dates, including timestamps."""
    assert compare("before", "date", "2024-01-01", "2024-02-01") is True
    assert compare("after", "date", "2024-03-01T10:00:00Z", "2024-02-01") is True
    assert compare("equals", "date", "2024-03-01T23:59:00", "2024-03-01") is True
    assert compare("on_or_before", "date", "2024-03-01", "2024-03-01") is True
    assert compare("after", "date", "not a date", "2024-02-01") is False


def test_choice_equals_and_membership():
    """Verifies single-select equality and 'contains' as membership in a literal list."""
    assert compare("equals", "select", "Red", "Red") is True
    assert compare("does_not_equal", "select", "Red", "Blue") is True
    assert compare("contains", "select", "Red", ["Red", "Green"]) is True
    assert compare("contains", "select", None, ["Red", "Green"]) is False


def test_checkbox_operators():
    """Verifies checkbox truthiness tokens and the absent-is-unchecked rule."""
    assert compare("is_checked", "checkbox", True, None) is True
    assert compare("is_checked", "checkbox", "on", None) is True
    assert compare("is_not_checked", "checkbox", None, None) is True
    assert compare("equals", "checkbox", "false", False) is True
    assert compare("equals", "checkbox", True, "maybe") is False


# -----------------------------
# List family
# -----------------------------


def test_list_contains_and_set_equality():
    """Verifies list membership and order-insensitive equality."""
    assert compare("contains", "multi_select", ["a", "b"], "a") is True
    assert compare("contains", "multi_select", ["a", "b"], ["a", "b"]) is True
    assert compare("not_contains", "multi_select", ["a", "b"], "c") is True
    assert compare("equals", "multi_select", ["b", "a"], ["a", "b"]) is True
    assert compare("equals", "multi_select", ["a"], ["a", "b"]) is False


def test_list_scalar_submission_is_one_item_list():
    """Verifies a bare scalar submitted for a list field is treated as one item."""
    assert compare("contains", "multi_select", "a", "a") is True


# -----------------------------
# Matrix family
# -----------------------------


def test_matrix_equals_checks_only_literal_rows():
    """Verifies matrix equality only inspects rows named by the literal."""
    submitted = {"A": "x", "B": "y"}
    assert compare("equals", "matrix", submitted, {"A": "x"}) is True
    assert compare("equals", "matrix", submitted, {"A": "x", "B": "z"}) is False


def test_matrix_equals_on_absent_row_is_false_without_raising():
    """Verifies a literal row missing from the submission does not match."""
    diagnostics = DiagnosticCollector()
    result = compare("equals", "matrix", {"A": "x", "B": "y"}, {"C": "x"}, diagnostics=diagnostics)
    assert result is False
    assert len(diagnostics) == 0


def test_matrix_equals_on_absent_submission_is_false():
    """Verifies an unanswered matrix compares as an empty mapping."""
    assert compare("equals", "matrix", None, {"A": "x"}) is False
    assert compare("is_empty", "matrix", None, None) is True
    assert compare("is_not_empty", "matrix", {"A": "x"}, None) is True


def test_matrix_contains_any_row():
    """Verifies matrix 'contains' matches when any literal row matches."""
    submitted = {"A": "x", "B": "y"}
    assert compare("contains", "matrix", submitted, {"A": "nope", "B": "y"}) is True
    assert compare("not_contains", "matrix", submitted, {"C": "x"}) is True


def test_matrix_non_mapping_literal_reports_invalid_value():
    """Verifies a non-mapping literal evaluates False for both polarities."""
    diagnostics = DiagnosticCollector()
    assert compare("equals", "matrix", {"A": "x"}, "x", diagnostics=diagnostics, field_id="f") is False
    assert compare("not_equals", "matrix", {"A": "x"}, "x", diagnostics=diagnostics, field_id="f") is False
    kinds = [d.kind for d in diagnostics.items]
    assert kinds == [INVALID_COMPARISON_VALUE, INVALID_COMPARISON_VALUE]


def test_matrix_submission_of_wrong_shape_is_empty():
    """Verifies a list submitted for a matrix field reads as an empty mapping."""
    assert compare("equals", "matrix", ["x"], {"A": "x"}) is False
    assert compare("is_empty", "matrix", ["x"], None) is True


# -----------------------------
# Unsupported pairs
# -----------------------------


def test_unsupported_operator_is_false_and_reported():
    """Verifies operator/type pairs without a comparison report a diagnostic."""
    diagnostics = DiagnosticCollector()
    result = compare(
        "greater_than", "matrix", {"A": "x"}, {"A": "x"},
        diagnostics=diagnostics, field_id="owner", ref_id="grid",
    )
    assert result is False
    (diag,) = diagnostics.items
    assert diag.kind == UNSUPPORTED_OPERATOR
    assert diag.field_id == "owner"
    assert diag.ref_id == "grid"


def test_unknown_field_type_is_unsupported():
    """Verifies an unknown referenced type never raises."""
    diagnostics = DiagnosticCollector()
    assert compare("equals", "signature", "x", "x", diagnostics=diagnostics) is False
    assert diagnostics.items[0].kind == UNSUPPORTED_OPERATOR


def test_unsupported_operator_without_collector_logs_warning(caplog):
    """Verifies diagnostics fall back to a WARNING log when no collector is given."""
    with caplog.at_level("WARNING", logger="formlogic.logic.comparator"):
        assert compare("before", "text", "a", "b") is False
    assert any("unsupported_operator" in r.getMessage() for r in caplog.records)


def test_supported_operators_per_type():
    """Verifies the operator set reflects the field type's comparison family."""
    checkbox_ops = supported_operators("checkbox")
    assert "is_checked" in checkbox_ops
    assert "is_empty" not in checkbox_ops
    assert "before" in supported_operators("date")
    assert "starts_with" not in supported_operators("number")
    assert supported_operators("unknown") == frozenset()
