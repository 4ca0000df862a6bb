"""Form logic engine: condition evaluation, state resolution and validation.

Everything here is pure and stateless; no module in this package performs
I/O or knows about HTTP.
"""

from __future__ import annotations

from formlogic.logic.comparator import compare, supported_operators
from formlogic.logic.condition_evaluator import conditions_hold, evaluate
from formlogic.logic.definition_loader import load_form_definition
from formlogic.logic.errors import MalformedDefinitionError, SubmissionRejected
from formlogic.logic.field_state import resolve_field_state, resolve_states, visible_field_ids
from formlogic.logic.orchestrator import evaluate_complete, evaluate_partial, validate_submission
from formlogic.logic.type_validators import validate_field
from formlogic.logic.visibility_delta import compute_visibility_delta

__all__ = [
    "compare",
    "supported_operators",
    "evaluate",
    "conditions_hold",
    "load_form_definition",
    "MalformedDefinitionError",
    "SubmissionRejected",
    "resolve_field_state",
    "resolve_states",
    "visible_field_ids",
    "evaluate_partial",
    "evaluate_complete",
    "validate_submission",
    "validate_field",
    "compute_visibility_delta",
]
