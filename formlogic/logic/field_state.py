"""Field State Resolver: per-field visibility and requiredness.

Each field starts at `{visible: not hidden, required: required}`. When its
logic conditions hold, its actions are folded over that state in authoring
order (declarative overwrites, so the last matching action wins). A field
that ends up hidden is never required.

A field's actions only ever touch its own state. Cross-field gating happens
through condition leaves reading submission data, so fields can be resolved
in any order, or independently.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional
import logging

from formlogic.config import EngineConfig
from formlogic.logic.condition_evaluator import conditions_hold
from formlogic.logic.diagnostics import DiagnosticCollector
from formlogic.models.evaluation import FieldState
from formlogic.models.form_definition import FieldDefinition, FormDefinition
from formlogic.models.operators import Action

logger = logging.getLogger(__name__)


def initial_state(field: FieldDefinition) -> FieldState:
    # Base requiredness is kept for hidden fields so a "show" action restores it
    return FieldState(visible=not field.hidden, required=field.required)


def apply_actions(state: FieldState, actions: Iterable[str]) -> FieldState:
    """Fold actions over a state; hidden wins over required at the end."""
    visible, required = state.visible, state.required
    for action in actions:
        if action == Action.SHOW:
            visible = True
        elif action == Action.HIDE:
            visible = False
        elif action == Action.REQUIRE:
            required = True
        elif action == Action.UNREQUIRE:
            required = False
    return FieldState(visible=visible, required=required and visible)


def resolve_field_state(
    field: FieldDefinition,
    data: Mapping[str, Any] | None,
    form: Optional[FormDefinition] = None,
    *,
    diagnostics: Optional[DiagnosticCollector] = None,
    config: Optional[EngineConfig] = None,
) -> FieldState:
    """Resolve `{visible, required}` for one field."""
    cfg = config or EngineConfig()
    logic = field.logic
    actions: Iterable[str] = ()
    if logic is not None and logic.actions and conditions_hold(
        logic.conditions,
        data,
        form=form,
        owner_id=field.id,
        diagnostics=diagnostics,
        max_depth=cfg.max_condition_depth,
    ):
        actions = logic.actions
    return apply_actions(initial_state(field), actions)


def resolve_states(
    form: FormDefinition,
    data: Mapping[str, Any] | None,
    *,
    diagnostics: Optional[DiagnosticCollector] = None,
    config: Optional[EngineConfig] = None,
) -> Dict[str, FieldState]:
    """Resolve every field's state, keyed by field id in document order."""
    states: Dict[str, FieldState] = {}
    for field in form.properties:
        states[field.id] = resolve_field_state(
            field, data, form, diagnostics=diagnostics, config=config
        )
    logger.debug(
        "states_resolved fields=%s hidden=%s",
        len(states),
        [fid for fid, s in states.items() if not s.visible],
    )
    return states


def visible_field_ids(states: Mapping[str, FieldState]) -> List[str]:
    """Return ids of visible fields, preserving the mapping's order."""
    return [fid for fid, state in states.items() if state.visible]


__all__ = [
    "initial_state",
    "apply_actions",
    "resolve_field_state",
    "resolve_states",
    "visible_field_ids",
]
