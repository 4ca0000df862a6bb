"""FieldType enumeration and value-shape lookup for form fields.

Provides a simple constants container instead of an Enum to keep wire
values plain strings. Each type maps to one value shape (scalar, list or
mapping) and one comparison family used by the Value Comparator.
"""

from __future__ import annotations


class FieldType:
    TEXT = "text"
    EMAIL = "email"
    URL = "url"
    PHONE_NUMBER = "phone_number"
    NUMBER = "number"
    RATING = "rating"
    SCALE = "scale"
    SLIDER = "slider"
    DATE = "date"
    SELECT = "select"
    CHECKBOX = "checkbox"
    MULTI_SELECT = "multi_select"
    FILES = "files"
    MATRIX = "matrix"


class ValueShape:
    SCALAR = "scalar"
    LIST = "list"
    MAPPING = "mapping"


class ComparisonFamily:
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CHOICE = "choice"
    BOOLEAN = "boolean"
    LIST = "list"
    MATRIX = "matrix"


_FAMILIES: dict[str, str] = {
    FieldType.TEXT: ComparisonFamily.TEXT,
    FieldType.EMAIL: ComparisonFamily.TEXT,
    FieldType.URL: ComparisonFamily.TEXT,
    FieldType.PHONE_NUMBER: ComparisonFamily.TEXT,
    FieldType.NUMBER: ComparisonFamily.NUMBER,
    FieldType.RATING: ComparisonFamily.NUMBER,
    FieldType.SCALE: ComparisonFamily.NUMBER,
    FieldType.SLIDER: ComparisonFamily.NUMBER,
    FieldType.DATE: ComparisonFamily.DATE,
    FieldType.SELECT: ComparisonFamily.CHOICE,
    FieldType.CHECKBOX: ComparisonFamily.BOOLEAN,
    FieldType.MULTI_SELECT: ComparisonFamily.LIST,
    FieldType.FILES: ComparisonFamily.LIST,
    FieldType.MATRIX: ComparisonFamily.MATRIX,
}

_SHAPES: dict[str, str] = {
    ComparisonFamily.TEXT: ValueShape.SCALAR,
    ComparisonFamily.NUMBER: ValueShape.SCALAR,
    ComparisonFamily.DATE: ValueShape.SCALAR,
    ComparisonFamily.CHOICE: ValueShape.SCALAR,
    ComparisonFamily.BOOLEAN: ValueShape.SCALAR,
    ComparisonFamily.LIST: ValueShape.LIST,
    ComparisonFamily.MATRIX: ValueShape.MAPPING,
}

KNOWN_FIELD_TYPES: frozenset[str] = frozenset(_FAMILIES)


def family_of(field_type: str) -> str | None:
    """Return the comparison family for a field type, or None when unknown."""
    return _FAMILIES.get(field_type)


def shape_of(field_type: str) -> str:
    """Return the value shape for a field type; unknown types are scalar."""
    family = _FAMILIES.get(field_type)
    return _SHAPES.get(family, ValueShape.SCALAR) if family else ValueShape.SCALAR


__all__ = [
    "FieldType",
    "ValueShape",
    "ComparisonFamily",
    "KNOWN_FIELD_TYPES",
    "family_of",
    "shape_of",
]
