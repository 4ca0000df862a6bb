"""Value Comparator: type-aware comparison of a submitted value with a literal.

`compare()` is total. It looks up a pure function in a table keyed by
(comparison family, operator); pairs missing from the table evaluate to
False and are reported as `unsupported_operator` diagnostics. Submitted
values go through `normalize_value` first, so an absent answer is the type's
empty value and never an error.

Matrix comparison values are partial row -> column mappings. A row named in
the comparison value but missing from the submission simply does not match.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Tuple
import logging

from formlogic.logic.diagnostics import (
    INVALID_COMPARISON_VALUE,
    UNSUPPORTED_OPERATOR,
    DiagnosticCollector,
)
from formlogic.logic.value_canonical import (
    canonical_text,
    is_empty_value,
    normalize_value,
    to_bool,
    to_date,
    to_number,
)
from formlogic.models.field_type import ComparisonFamily as F, family_of
from formlogic.models.operators import Operator as Op, normalize_operator

logger = logging.getLogger(__name__)


class _InvalidComparisonValue(ValueError):
    """Raised inside a comparison when the literal has the wrong shape."""


def _negate(fn: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    return lambda v, c: not fn(v, c)


def _ordered(cast: Callable[[Any], Any], test: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    """Ordering comparison that is False when either side is non-comparable."""

    def run(v: Any, c: Any) -> bool:
        a, b = cast(v), cast(c)
        if a is None or b is None:
            return False
        return test(a, b)

    return run


def _as_texts(value: Any) -> list[str]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return [canonical_text(x) for x in value]
    return [canonical_text(value)]


# -- text ---------------------------------------------------------------------

def _text_equals(v: Any, c: Any) -> bool:
    return canonical_text(v) == canonical_text(c)


def _text_contains(v: Any, c: Any) -> bool:
    return canonical_text(c) in canonical_text(v)


def _length(test: Callable[[int, float], bool]) -> Callable[[Any, Any], bool]:
    def run(v: Any, c: Any) -> bool:
        limit = to_number(c)
        return limit is not None and test(len(canonical_text(v)), limit)

    return run


# -- number / date --------------------------------------------------------------

def _number_equals(v: Any, c: Any) -> bool:
    a, b = to_number(v), to_number(c)
    return a is not None and b is not None and a == b


def _date_equals(v: Any, c: Any) -> bool:
    a, b = to_date(v), to_date(c)
    return a is not None and b is not None and a == b


# -- choice (single select) ---------------------------------------------------

def _selected(v: Any) -> list[str]:
    return [t for t in _as_texts(v) if t != ""]


def _choice_equals(v: Any, c: Any) -> bool:
    return _selected(v) == [canonical_text(c)]


def _choice_in(v: Any, c: Any) -> bool:
    allowed = set(_as_texts(c))
    selected = _selected(v)
    return bool(selected) and all(s in allowed for s in selected)


# -- boolean (checkbox) -------------------------------------------------------

def _bool_equals(v: Any, c: Any) -> bool:
    expected = to_bool(c)
    if expected is None:
        return False
    return (to_bool(v) is True) == expected


def _is_checked(v: Any, _c: Any) -> bool:
    return to_bool(v) is True


# -- list (multi_select, files) -----------------------------------------------

def _list_contains(v: Any, c: Any) -> bool:
    items = set(_as_texts(v))
    return all(t in items for t in _as_texts(c))


def _list_equals(v: Any, c: Any) -> bool:
    return set(_as_texts(v)) == set(_as_texts(c))


# -- matrix -------------------------------------------------------------------

def _matrix_literal(c: Any) -> Mapping[str, Any]:
    if not isinstance(c, Mapping):
        raise _InvalidComparisonValue(f"matrix comparison value must be a mapping, got {type(c).__name__}")
    return c


def _row_matches(v: Mapping[str, Any], row: Any, expected: Any) -> bool:
    submitted = v.get(str(row))
    if submitted is None:
        return False
    return canonical_text(submitted) in _as_texts(expected)


def _matrix_equals(v: Any, c: Any) -> bool:
    literal = _matrix_literal(c)
    return all(_row_matches(v, row, col) for row, col in literal.items())


def _matrix_contains(v: Any, c: Any) -> bool:
    literal = _matrix_literal(c)
    return any(_row_matches(v, row, col) for row, col in literal.items())


def _matrix_negated(fn: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    # Shape-check the literal before negating so a bad literal stays False
    def run(v: Any, c: Any) -> bool:
        _matrix_literal(c)
        return not fn(v, c)

    return run


def _empty_check(family: str) -> Tuple[Callable[[Any, Any], bool], Callable[[Any, Any], bool]]:
    probe_type = {
        F.TEXT: "text",
        F.NUMBER: "number",
        F.DATE: "date",
        F.CHOICE: "select",
        F.LIST: "multi_select",
        F.MATRIX: "matrix",
    }[family]

    def is_empty(v: Any, _c: Any) -> bool:
        return is_empty_value(probe_type, v)

    return is_empty, _negate(is_empty)


ComparisonFn = Callable[[Any, Any], bool]

_TABLE: Dict[Tuple[str, str], ComparisonFn] = {
    (F.TEXT, Op.EQUALS): _text_equals,
    (F.TEXT, Op.NOT_EQUALS): _negate(_text_equals),
    (F.TEXT, Op.CONTAINS): _text_contains,
    (F.TEXT, Op.NOT_CONTAINS): _negate(_text_contains),
    (F.TEXT, Op.STARTS_WITH): lambda v, c: canonical_text(v).startswith(canonical_text(c)),
    (F.TEXT, Op.ENDS_WITH): lambda v, c: canonical_text(v).endswith(canonical_text(c)),
    (F.TEXT, Op.CONTENT_LENGTH_EQUALS): _length(lambda n, limit: n == limit),
    (F.TEXT, Op.CONTENT_LENGTH_GREATER_THAN): _length(lambda n, limit: n > limit),
    (F.TEXT, Op.CONTENT_LENGTH_LESS_THAN): _length(lambda n, limit: n < limit),
    (F.NUMBER, Op.EQUALS): _number_equals,
    (F.NUMBER, Op.NOT_EQUALS): _negate(_number_equals),
    (F.NUMBER, Op.GREATER_THAN): _ordered(to_number, lambda a, b: a > b),
    (F.NUMBER, Op.LESS_THAN): _ordered(to_number, lambda a, b: a < b),
    (F.NUMBER, Op.GREATER_THAN_OR_EQUAL_TO): _ordered(to_number, lambda a, b: a >= b),
    (F.NUMBER, Op.LESS_THAN_OR_EQUAL_TO): _ordered(to_number, lambda a, b: a <= b),
    (F.DATE, Op.EQUALS): _date_equals,
    (F.DATE, Op.NOT_EQUALS): _negate(_date_equals),
    (F.DATE, Op.AFTER): _ordered(to_date, lambda a, b: a > b),
    (F.DATE, Op.BEFORE): _ordered(to_date, lambda a, b: a < b),
    (F.DATE, Op.ON_OR_AFTER): _ordered(to_date, lambda a, b: a >= b),
    (F.DATE, Op.ON_OR_BEFORE): _ordered(to_date, lambda a, b: a <= b),
    (F.DATE, Op.GREATER_THAN): _ordered(to_date, lambda a, b: a > b),
    (F.DATE, Op.LESS_THAN): _ordered(to_date, lambda a, b: a < b),
    (F.CHOICE, Op.EQUALS): _choice_equals,
    (F.CHOICE, Op.NOT_EQUALS): _negate(_choice_equals),
    (F.CHOICE, Op.CONTAINS): _choice_in,
    (F.CHOICE, Op.NOT_CONTAINS): _negate(_choice_in),
    (F.BOOLEAN, Op.EQUALS): _bool_equals,
    (F.BOOLEAN, Op.NOT_EQUALS): lambda v, c: to_bool(c) is not None and not _bool_equals(v, c),
    (F.BOOLEAN, Op.IS_CHECKED): _is_checked,
    (F.BOOLEAN, Op.IS_NOT_CHECKED): _negate(_is_checked),
    (F.LIST, Op.CONTAINS): _list_contains,
    (F.LIST, Op.NOT_CONTAINS): _negate(_list_contains),
    (F.LIST, Op.EQUALS): _list_equals,
    (F.LIST, Op.NOT_EQUALS): _negate(_list_equals),
    (F.MATRIX, Op.EQUALS): _matrix_equals,
    (F.MATRIX, Op.NOT_EQUALS): _matrix_negated(_matrix_equals),
    (F.MATRIX, Op.CONTAINS): _matrix_contains,
    (F.MATRIX, Op.NOT_CONTAINS): _matrix_negated(_matrix_contains),
}

for _family in (F.TEXT, F.NUMBER, F.DATE, F.CHOICE, F.LIST, F.MATRIX):
    _TABLE[(_family, Op.IS_EMPTY)], _TABLE[(_family, Op.IS_NOT_EMPTY)] = _empty_check(_family)


def supported_operators(field_type: str) -> frozenset[str]:
    """Return the canonical operators that apply to a field type."""
    family = family_of(field_type)
    return frozenset(op for (fam, op) in _TABLE if fam == family)


def compare(
    operator: str,
    field_type: str,
    submitted: Any,
    comparison: Any,
    *,
    diagnostics: Optional[DiagnosticCollector] = None,
    field_id: str = "",
    ref_id: Optional[str] = None,
) -> bool:
    """Compare a submitted value with a condition literal; never raises.

    `field_id` is the field owning the condition and `ref_id` the field whose
    value is being compared; both are only used for diagnostics.
    """
    op = normalize_operator(operator)
    family = family_of(field_type)
    fn = _TABLE.get((family, op)) if family else None
    if fn is None:
        _report(
            diagnostics,
            UNSUPPORTED_OPERATOR,
            field_id,
            f"operator '{op}' does not apply to field type '{field_type}'",
            ref_id,
        )
        return False
    value = normalize_value(field_type, submitted)
    try:
        return bool(fn(value, comparison))
    except (TypeError, ValueError, ArithmeticError) as e:
        _report(diagnostics, INVALID_COMPARISON_VALUE, field_id, f"{op}: {e}", ref_id)
        return False


def _report(
    diagnostics: Optional[DiagnosticCollector],
    kind: str,
    field_id: str,
    detail: str,
    ref_id: Optional[str],
) -> None:
    if diagnostics is not None:
        diagnostics.report(kind, field_id, detail, ref_id=ref_id)
    else:
        logger.warning("engine_diagnostic kind=%s field_id=%s ref_id=%s detail=%s", kind, field_id, ref_id, detail)


__all__ = ["compare", "supported_operators"]
