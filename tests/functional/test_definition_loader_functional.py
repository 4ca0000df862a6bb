"""Functional tests for loading form definitions.

Definitions that cannot be evaluated must be rejected at load time with a
MalformedDefinitionError carrying a stable code.
"""

from __future__ import annotations

import pytest

from formlogic.config import EngineConfig
from formlogic.logic.definition_loader import load_form_definition
from formlogic.logic.errors import MalformedDefinitionError
from formlogic.models.form_definition import ConditionGroup, ConditionLeaf, FormDefinition


def test_accepts_list_and_properties_mapping(matrix_field):
    """Verifies both the bare field list and the form record shape load."""
    from_list = load_form_definition([matrix_field])
    from_record = load_form_definition({"title": "Survey", "properties": [matrix_field]})
    assert from_list == from_record
    assert from_list.get("matrix_field").rows == ("Row1", "Row2", "Row3")


def test_existing_definition_passes_through(matrix_field):
    """Verifies an already-parsed definition is returned unchanged."""
    form = load_form_definition([matrix_field])
    assert load_form_definition(form) is form


def test_builder_logic_shape_is_parsed(experience_form):
    """Verifies builder conditions and action aliases map onto the models."""
    form = load_form_definition(experience_form)
    logic = form.get("details").logic
    assert logic.actions == ("require",)
    assert isinstance(logic.conditions, ConditionGroup)
    (leaf,) = logic.conditions.children
    assert isinstance(leaf, ConditionLeaf)
    assert leaf.field_ref.id == "experience"
    assert leaf.field_ref.type == "matrix"
    assert leaf.comparison_value == {"15+": "Viel"}


def test_camel_case_operators_are_normalised(make_group, make_leaf):
    """Verifies camelCase operators load as their snake_case form."""
    form = load_form_definition([
        {"id": "a", "type": "text"},
        {
            "id": "b",
            "type": "text",
            "logic": {"conditions": make_group("or", make_leaf("a", "text", "notEquals", "x")), "actions": ["hide"]},
        },
    ])
    assert form.get("b").logic.conditions.children[0].operator == "not_equals"


def test_integer_ids_are_stringified():
    """Verifies numeric ids from storage are treated as strings."""
    form = load_form_definition([{"id": 7, "type": "text"}])
    assert form.get("7") is not None


def test_loaded_definition_is_immutable(matrix_field):
    """Verifies definitions are frozen so they can be shared between evaluations."""
    form = load_form_definition([matrix_field])
    with pytest.raises(Exception):
        form.properties[0].required = False  # type: ignore[misc]


@pytest.mark.parametrize(
    "raw,code",
    [
        ("not a form", "definition_invalid"),
        ({"title": "no fields"}, "definition_invalid"),
        ([{"id": "a", "type": "hologram"}], "unknown_field_type"),
        ([{"id": "a", "type": "text"}, {"id": "a", "type": "text"}], "duplicate_field_id"),
        (
            [{"id": "a", "type": "text", "logic": {"conditions": None, "actions": ["explode"]}}],
            "unknown_action",
        ),
        ([{"id": "m", "type": "matrix", "required": True, "rows": [], "columns": ["A"]}], "matrix_config_incomplete"),
        (
            [{"id": "m", "type": "matrix", "rows": ["R"], "columns": ["A"], "required_rows": ["X"]}],
            "matrix_config_incomplete",
        ),
        ([{"id": "a"}], "definition_invalid"),
        ([{"id": "s", "type": "select", "options": 5}], "definition_invalid"),
        ([{"id": "s", "type": "select", "options": "Yes"}], "definition_invalid"),
        ([{"id": "a", "type": "text", "logic": {"conditions": None, "actions": 5}}], "definition_invalid"),
    ],
)
def test_rejects_malformed_definitions(raw, code):
    """Verifies each structural problem maps to its error code."""
    with pytest.raises(MalformedDefinitionError) as excinfo:
        load_form_definition(raw)
    assert excinfo.value.code == code


def test_rejection_names_offending_field():
    """Verifies the error points at the field that failed to parse."""
    with pytest.raises(MalformedDefinitionError) as excinfo:
        load_form_definition([{"id": "ok", "type": "text"}, {"id": "bad", "type": "hologram"}])
    assert excinfo.value.field_id == "bad"
    assert excinfo.value.errors


def test_rejects_cyclic_definition(make_leaf):
    """Verifies a condition tree that contains itself is rejected."""
    group = {"operatorIdentifier": "and", "children": [make_leaf("a", "text", "is_empty")]}
    group["children"].append(group)
    raw = [{"id": "a", "type": "text", "logic": {"conditions": group, "actions": ["hide"]}}]
    with pytest.raises(MalformedDefinitionError) as excinfo:
        load_form_definition(raw)
    assert excinfo.value.code == "definition_cyclic"
    assert excinfo.value.field_id == "a"


def test_shared_subtree_is_not_a_cycle(make_leaf):
    """Verifies the same subtree reused in two places loads fine."""
    shared = {"operatorIdentifier": "and", "children": [make_leaf("a", "text", "is_empty")]}
    conditions = {"operatorIdentifier": "or", "children": [shared, shared]}
    form = load_form_definition([
        {"id": "a", "type": "text"},
        {"id": "b", "type": "text", "logic": {"conditions": conditions, "actions": ["hide"]}},
    ])
    assert form.get("b").logic.conditions.leaf_count() == 2


def test_rejects_excessive_nesting(make_leaf):
    """Verifies nesting past the configured ceiling is rejected at load time."""
    node = {"operatorIdentifier": "and", "children": [make_leaf("a", "text", "is_empty")]}
    for _ in range(3):
        node = {"operatorIdentifier": "and", "children": [node]}
    raw = [
        {"id": "a", "type": "text"},
        {"id": "b", "type": "text", "logic": {"conditions": node, "actions": ["hide"]}},
    ]
    assert isinstance(load_form_definition(raw, config=EngineConfig(max_condition_depth=4)), FormDefinition)
    with pytest.raises(MalformedDefinitionError) as excinfo:
        load_form_definition(raw, config=EngineConfig(max_condition_depth=3))
    assert excinfo.value.code == "definition_too_deep"
    assert excinfo.value.field_id == "b"


def test_rejection_is_logged(caplog):
    """Verifies rejected definitions are logged with their code."""
    with caplog.at_level("WARNING", logger="formlogic.logic.definition_loader"):
        with pytest.raises(MalformedDefinitionError):
            load_form_definition([{"id": "a", "type": "hologram"}])
    assert any("form_definition_rejected code=unknown_field_type" in r.getMessage() for r in caplog.records)
