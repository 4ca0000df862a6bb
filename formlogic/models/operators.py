"""Condition operator and logic action identifiers.

The form builder emits snake_case identifiers (`does_not_equal`), while
hand-written definitions often use camelCase (`notEquals`). Both are folded
into one canonical snake_case vocabulary here so the comparator table has a
single key per operator.
"""

from __future__ import annotations

import re


class Operator:
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL_TO = "greater_than_or_equal_to"
    LESS_THAN_OR_EQUAL_TO = "less_than_or_equal_to"
    BEFORE = "before"
    AFTER = "after"
    ON_OR_BEFORE = "on_or_before"
    ON_OR_AFTER = "on_or_after"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"
    IS_CHECKED = "is_checked"
    IS_NOT_CHECKED = "is_not_checked"
    CONTENT_LENGTH_EQUALS = "content_length_equals"
    CONTENT_LENGTH_GREATER_THAN = "content_length_greater_than"
    CONTENT_LENGTH_LESS_THAN = "content_length_less_than"


_OPERATOR_ALIASES = {
    "does_not_equal": Operator.NOT_EQUALS,
    "not_equal": Operator.NOT_EQUALS,
    "does_not_contain": Operator.NOT_CONTAINS,
    "not_empty": Operator.IS_NOT_EMPTY,
    "empty": Operator.IS_EMPTY,
    "greater_than_or_equal": Operator.GREATER_THAN_OR_EQUAL_TO,
    "less_than_or_equal": Operator.LESS_THAN_OR_EQUAL_TO,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_operator(raw: object) -> str:
    """Return the canonical snake_case identifier for an operator token.

    Unknown tokens are returned normalised but otherwise untouched; the
    comparator decides whether a (family, operator) pair is supported.
    """
    token = str(raw or "").strip()
    token = _CAMEL_BOUNDARY.sub("_", token).replace("-", "_").lower()
    return _OPERATOR_ALIASES.get(token, token)


class Action:
    SHOW = "show"
    HIDE = "hide"
    REQUIRE = "require"
    UNREQUIRE = "unrequire"


KNOWN_ACTIONS: frozenset[str] = frozenset({Action.SHOW, Action.HIDE, Action.REQUIRE, Action.UNREQUIRE})

_ACTION_ALIASES = {
    "show-block": Action.SHOW,
    "hide-block": Action.HIDE,
    "require-answer": Action.REQUIRE,
    "make-it-optional": Action.UNREQUIRE,
}


def normalize_action(raw: object) -> str:
    """Map a builder action identifier to its canonical name.

    Raises ValueError with a code token when the action is not recognised.
    """
    token = str(raw or "").strip().lower()
    token = _ACTION_ALIASES.get(token, token)
    if token not in KNOWN_ACTIONS:
        raise ValueError(f"unknown_action: {raw!r}")
    return token


class Combinator:
    AND = "and"
    OR = "or"


__all__ = [
    "Operator",
    "Action",
    "Combinator",
    "KNOWN_ACTIONS",
    "normalize_operator",
    "normalize_action",
]
