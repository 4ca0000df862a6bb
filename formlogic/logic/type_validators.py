"""Type-aware validation of submitted field values.

`validate_field()` applies, in order:
- hidden fields: no errors, whatever the value
- required check against the type's empty value; a required-but-empty
  field gets exactly one error and no further checks
- type-specific checks, looked up by field type

Errors carry a stable `reason` for API consumers and a rendered message
in the form backend's wording (e.g. "The Email field is required.").
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping
from urllib.parse import urlparse
import re

from formlogic.logic.value_canonical import (
    canonical_text,
    is_empty_value,
    known_rows,
    normalize_value,
    to_bool,
    to_date,
    to_number,
)
from formlogic.models.evaluation import ErrorMessage, FieldState
from formlogic.models.field_type import FieldType, ValueShape
from formlogic.models.form_definition import FieldDefinition


MSG_REQUIRED = "The {label} field is required."
MSG_EMAIL = "The {label} field must be a valid email address."
MSG_URL = "The {label} field must be a valid URL."
MSG_NUMERIC = "The {label} field must be a number."
MSG_MIN = "The {label} field must be at least {min}."
MSG_MAX = "The {label} field must not be greater than {max}."
MSG_TOO_LONG = "The {label} field must not be greater than {max} characters."
MSG_DATE = "The {label} field must be a valid date."
MSG_OPTION = "The selected {label} is invalid."
MSG_LIST = "The {label} field must be an array."
MSG_BOOLEAN = "The {label} field must be true or false."
MSG_TOO_MANY_FILES = "The {label} field must not have more than {max} items."
MSG_MATRIX_VALUE = "Invalid value '{value}' for row '{row}'."
MSG_MATRIX_ROW = "Missing value for row '{row}'."

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _error(reason: str, template: str, **params: Any) -> ErrorMessage:
    rendered = {k: canonical_text(v) for k, v in params.items()}
    return ErrorMessage(reason=reason, message=template.format(**rendered), params=rendered)


def _check_text(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    limit = field.max_char_limit
    if limit is not None and len(canonical_text(value)) > limit:
        return [_error("too_long", MSG_TOO_LONG, label=field.label, max=limit)]
    return []


def _check_email(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    if not isinstance(value, str) or not _EMAIL_RE.match(value.strip()):
        return [_error("invalid_email", MSG_EMAIL, label=field.label)]
    return _check_text(field, state, value)


def _check_url(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    parsed = urlparse(value.strip()) if isinstance(value, str) else None
    if parsed is None or parsed.scheme not in {"http", "https"} or not parsed.netloc:
        return [_error("invalid_url", MSG_URL, label=field.label)]
    return _check_text(field, state, value)


def _check_number(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    number = to_number(value)
    if number is None:
        return [_error("not_numeric", MSG_NUMERIC, label=field.label)]
    errors: List[ErrorMessage] = []
    if field.min_value is not None and number < field.min_value:
        errors.append(_error("below_minimum", MSG_MIN, label=field.label, min=field.min_value))
    if field.max_value is not None and number > field.max_value:
        errors.append(_error("above_maximum", MSG_MAX, label=field.label, max=field.max_value))
    return errors


def _check_date(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    if to_date(value) is None:
        return [_error("invalid_date", MSG_DATE, label=field.label)]
    return []


def _check_options(field: FieldDefinition, items: List[Any]) -> List[ErrorMessage]:
    if field.allow_creation or not field.options:
        return []
    allowed = set(field.options)
    if any(canonical_text(item) not in allowed for item in items):
        return [_error("invalid_option", MSG_OPTION, label=field.label)]
    return []


def _check_select(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    items = list(value) if isinstance(value, (list, tuple)) else [value]
    return _check_options(field, items)


def _check_multi_select(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    return _check_options(field, normalize_value(field.type, value))


def _check_checkbox(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    if to_bool(value) is None:
        return [_error("not_boolean", MSG_BOOLEAN, label=field.label)]
    return []


def _check_files(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    files = normalize_value(field.type, value)
    if field.max_files is not None and len(files) > field.max_files:
        return [_error("too_many_files", MSG_TOO_MANY_FILES, label=field.label, max=field.max_files)]
    return []


def _check_matrix(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    """Validate submitted rows against the configured columns.

    Row keys not listed in `rows` are ignored. Rows missing from the
    submission are only flagged when `required_rows` names them and the
    field is currently required.
    """
    cells = known_rows(normalize_value(field.type, value), field.rows)
    columns = set(field.columns)
    errors: List[ErrorMessage] = []
    for row, column in cells.items():
        if canonical_text(column) not in columns:
            errors.append(_error("invalid_matrix_value", MSG_MATRIX_VALUE, value=column, row=row))
    if state.required:
        for row in field.required_rows:
            if row not in cells:
                errors.append(_error("missing_matrix_row", MSG_MATRIX_ROW, row=row))
    return errors


Validator = Callable[[FieldDefinition, FieldState, Any], List[ErrorMessage]]

TYPE_VALIDATORS: Dict[str, Validator] = {
    FieldType.TEXT: _check_text,
    FieldType.PHONE_NUMBER: _check_text,
    FieldType.EMAIL: _check_email,
    FieldType.URL: _check_url,
    FieldType.NUMBER: _check_number,
    FieldType.RATING: _check_number,
    FieldType.SCALE: _check_number,
    FieldType.SLIDER: _check_number,
    FieldType.DATE: _check_date,
    FieldType.SELECT: _check_select,
    FieldType.MULTI_SELECT: _check_multi_select,
    FieldType.CHECKBOX: _check_checkbox,
    FieldType.FILES: _check_files,
    FieldType.MATRIX: _check_matrix,
}


def _shape_errors(field: FieldDefinition, value: Any) -> List[ErrorMessage]:
    """Reject submitted values whose container shape cannot be the field's."""
    if value is None:
        return []
    if field.shape == ValueShape.MAPPING and not isinstance(value, Mapping):
        # An empty list or blank string is how clients send an untouched matrix
        if value in ([], "") or (isinstance(value, str) and not value.strip()):
            return []
        return [_error("not_a_mapping", MSG_LIST, label=field.label)]
    if field.shape == ValueShape.LIST and isinstance(value, Mapping) and value:
        return [_error("not_a_list", MSG_LIST, label=field.label)]
    return []


def validate_field(field: FieldDefinition, state: FieldState, value: Any) -> List[ErrorMessage]:
    """Return the ordered validation errors for one field's submitted value."""
    if not state.visible:
        return []
    shape_errors = _shape_errors(field, value)
    if shape_errors:
        return shape_errors
    if field.shape == ValueShape.MAPPING:
        # Unknown row keys neither count as answers nor get validated
        value = known_rows(normalize_value(field.type, value), field.rows)
    if is_empty_value(field.type, value):
        if state.required:
            return [_error("required", MSG_REQUIRED, label=field.label)]
        return []
    checker = TYPE_VALIDATORS.get(field.type)
    return checker(field, state, value) if checker else []


__all__ = ["validate_field", "TYPE_VALIDATORS"]
