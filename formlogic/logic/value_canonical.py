"""Canonicalization helpers for submitted field values.

This is the single place that decides what an absent or oddly-shaped value
means. Every comparison and validator goes through `normalize_value`, so
the rule "absent => the type's empty value" is applied once, here, instead of
as ad hoc null checks at each call site:

- scalar  -> ""   (None and whitespace-only strings count as empty)
- checkbox-> False
- list    -> []
- mapping -> {}

Conversions (`to_number`, `to_date`, `to_bool`) return None for anything
non-comparable and never raise.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence
import math

from formlogic.models.field_type import FieldType, ValueShape, shape_of

_MISSING = object()


def empty_value(field_type: str) -> Any:
    """Return the empty value for a field type."""
    if field_type == FieldType.CHECKBOX:
        return False
    shape = shape_of(field_type)
    if shape == ValueShape.LIST:
        return []
    if shape == ValueShape.MAPPING:
        return {}
    return ""


def lookup(data: Mapping[str, Any] | None, field_id: str) -> Any:
    """Fetch a submitted value; an absent key reads as None."""
    if not isinstance(data, Mapping):
        return None
    value = data.get(field_id, _MISSING)
    return None if value is _MISSING else value


def normalize_value(field_type: str, value: Any) -> Any:
    """Coerce a submitted value into the shape its field type expects.

    - None -> empty value for the type
    - list types: a bare scalar becomes a one-item list; mappings become []
    - mapping types: anything that is not a mapping becomes {}; row keys are
      stringified and unanswered (None) cells are dropped; use `known_rows`
      to also drop rows the field does not configure
    - scalar types: returned as submitted (conversion happens per operator)
    """
    if value is None:
        return empty_value(field_type)
    shape = shape_of(field_type)
    if shape == ValueShape.LIST:
        if isinstance(value, (list, tuple)):
            return [v for v in value if v is not None]
        if isinstance(value, Mapping):
            return []
        return [value]
    if shape == ValueShape.MAPPING:
        if not isinstance(value, Mapping):
            return {}
        return {str(k): v for k, v in value.items() if v is not None}
    return value


def known_rows(cells: Mapping[str, Any], rows: Sequence[str]) -> dict:
    """Keep only the matrix cells whose row is configured on the field."""
    allowed = set(rows)
    return {row: v for row, v in cells.items() if row in allowed}


def is_empty_value(field_type: str, value: Any) -> bool:
    """Return True when the value is the type's empty value after normalization."""
    v = normalize_value(field_type, value)
    shape = shape_of(field_type)
    if shape in (ValueShape.LIST, ValueShape.MAPPING):
        return len(v) == 0
    if field_type == FieldType.CHECKBOX:
        return to_bool(v) is False
    if isinstance(v, str):
        return v.strip() == ""
    if isinstance(v, (list, tuple, Mapping)):
        return len(v) == 0
    return False


def canonical_text(value: Any) -> str:
    """Return a stable string representation of a scalar value.

    - Booleans -> "true" / "false"
    - Numbers  -> integer form when integral, else decimal string
    - Text     -> as-is string
    - None     -> ""
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        try:
            f = float(value)
            if math.isfinite(f) and float(int(f)) == f:
                return str(int(f))
            return str(f)
        except (ValueError, OverflowError):
            return str(value)
    return str(value)


def to_number(value: Any) -> Optional[float]:
    """Return a finite float for numbers and numeric strings, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        f = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return f if math.isfinite(f) else None


def to_date(value: Any) -> Optional[date]:
    """Parse ISO-8601 dates and datetimes to a calendar date, else None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


_TRUE_TOKENS = {"true", "1", "on", "yes"}
_FALSE_TOKENS = {"false", "0", "off", "no", ""}


def to_bool(value: Any) -> Optional[bool]:
    """Interpret checkbox-like values; None when the value is not boolean-ish."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
    return None


__all__ = [
    "empty_value",
    "lookup",
    "normalize_value",
    "known_rows",
    "is_empty_value",
    "canonical_text",
    "to_number",
    "to_date",
    "to_bool",
]
