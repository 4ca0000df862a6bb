from __future__ import annotations

"""Shared builders for functional tests of the form logic engine.

Form definitions are built in the form builder's wire shape (the same
shape the definition loader receives from storage) so every test goes
through the real parsing path.
"""

from typing import Any, Callable, Dict, List

import pytest


def _leaf(ref_id: str, ref_type: str, operator: str, value: Any = None) -> Dict[str, Any]:
    return {
        "identifier": ref_id,
        "value": {
            "operator": operator,
            "property_meta": {"id": ref_id, "type": ref_type},
            "value": value,
        },
    }


def _group(combinator: str, *children: Dict[str, Any]) -> Dict[str, Any]:
    return {"operatorIdentifier": combinator, "children": list(children)}


@pytest.fixture
def make_leaf() -> Callable[..., Dict[str, Any]]:
    return _leaf


@pytest.fixture
def make_group() -> Callable[..., Dict[str, Any]]:
    return _group


@pytest.fixture
def matrix_field() -> Dict[str, Any]:
    """Required matrix with three rows and three columns."""
    return {
        "id": "matrix_field",
        "name": "Matrix Question",
        "type": "matrix",
        "rows": ["Row1", "Row2", "Row3"],
        "columns": ["A", "B", "C"],
        "required": True,
    }


@pytest.fixture
def experience_form() -> List[Dict[str, Any]]:
    """Matrix plus a text field that becomes required when row '15+' is 'Viel'."""
    return [
        {
            "id": "experience",
            "name": "Experience Matrix",
            "type": "matrix",
            "rows": ["0-5", "5-10", "10-15", "15+"],
            "columns": ["Keine", "Wenig", "Mittel", "Viel"],
            "required": False,
        },
        {
            "id": "details",
            "name": "Details",
            "type": "text",
            "required": False,
            "logic": {
                "conditions": _group(
                    "and", _leaf("experience", "matrix", "equals", {"15+": "Viel"})
                ),
                "actions": ["require-answer"],
            },
        },
    ]


@pytest.fixture
def contact_form() -> List[Dict[str, Any]]:
    """Checkbox-gated contact fields with a nested OR group."""
    return [
        {"id": "name", "name": "Name", "type": "text", "required": True},
        {"id": "subscribe", "name": "Subscribe", "type": "checkbox"},
        {
            "id": "email",
            "name": "Email",
            "type": "email",
            "required": True,
            "hidden": True,
            "logic": {
                "conditions": _group("and", _leaf("subscribe", "checkbox", "is_checked")),
                "actions": ["show-block"],
            },
        },
        {"id": "age", "name": "Age", "type": "number", "min_value": 0, "max_value": 130},
        {
            "id": "guardian",
            "name": "Guardian",
            "type": "text",
            "hidden": True,
            "logic": {
                "conditions": _group(
                    "or",
                    _leaf("age", "number", "less_than", 18),
                    _group(
                        "and",
                        _leaf("age", "number", "is_empty"),
                        _leaf("name", "text", "starts_with", "Minor"),
                    ),
                ),
                "actions": ["show-block", "require-answer"],
            },
        },
    ]
