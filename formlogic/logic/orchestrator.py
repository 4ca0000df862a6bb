"""Evaluation Orchestrator: public entry points of the engine.

Both modes resolve every field's state first; they differ only in which
fields are validated:
- partial (live validation): only the requested field ids
- complete (submission): every field, plus the accepted answer set, which
  keeps answers for visible fields only

Validating a field uses the same resolver output and the same validator in
both modes, so a field checked live against final data gets exactly the
errors the submission check will report.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional
import logging

from formlogic.config import EngineConfig
from formlogic.logic.definition_loader import load_form_definition
from formlogic.logic.diagnostics import UNKNOWN_FIELD_REQUESTED, DiagnosticCollector
from formlogic.logic.errors import SubmissionRejected
from formlogic.logic.field_state import resolve_states
from formlogic.logic.type_validators import validate_field
from formlogic.logic.value_canonical import lookup
from formlogic.models.evaluation import EvaluationResult, FieldResult, FieldState
from formlogic.models.form_definition import FieldDefinition, FormDefinition

logger = logging.getLogger(__name__)


def _field_result(field: FieldDefinition, state: FieldState, data: Mapping[str, Any]) -> FieldResult:
    return FieldResult(
        visible=state.visible,
        required=state.required,
        errors=validate_field(field, state, lookup(data, field.id)),
    )


def _submission(data: Any) -> Mapping[str, Any]:
    return data if isinstance(data, Mapping) else {}


def evaluate_partial(
    form: FormDefinition | Any,
    data: Mapping[str, Any] | None,
    field_ids: Iterable[str] | str,
    *,
    config: Optional[EngineConfig] = None,
) -> EvaluationResult:
    """Resolve all states, validate only `field_ids`.

    Requested ids that are not in the form are skipped and reported as
    diagnostics. Results follow document order.
    """
    cfg = config or EngineConfig()
    definition = load_form_definition(form, config=cfg)
    submission = _submission(data)
    diagnostics = DiagnosticCollector()
    states = resolve_states(definition, submission, diagnostics=diagnostics, config=cfg)

    wanted = {field_ids} if isinstance(field_ids, str) else {str(f) for f in field_ids}
    for unknown in sorted(wanted - set(states)):
        diagnostics.report(UNKNOWN_FIELD_REQUESTED, unknown, "requested field is not part of the form")

    fields: Dict[str, FieldResult] = {
        f.id: _field_result(f, states[f.id], submission)
        for f in definition.properties
        if f.id in wanted
    }
    result = EvaluationResult(
        mode="partial",
        states=states,
        fields=fields,
        diagnostics=diagnostics.items,
    )
    logger.info(
        "evaluation_partial requested=%s failed=%s diagnostics=%s",
        sorted(wanted),
        list(result.error_map()),
        len(diagnostics),
    )
    return result


def evaluate_complete(
    form: FormDefinition | Any,
    data: Mapping[str, Any] | None,
    *,
    config: Optional[EngineConfig] = None,
) -> EvaluationResult:
    """Resolve all states and validate every field."""
    cfg = config or EngineConfig()
    definition = load_form_definition(form, config=cfg)
    submission = _submission(data)
    diagnostics = DiagnosticCollector()
    states = resolve_states(definition, submission, diagnostics=diagnostics, config=cfg)

    fields = {f.id: _field_result(f, states[f.id], submission) for f in definition.properties}
    accepted = {
        f.id: submission[f.id]
        for f in definition.properties
        if states[f.id].visible and f.id in submission
    }
    result = EvaluationResult(
        mode="complete",
        states=states,
        fields=fields,
        diagnostics=diagnostics.items,
        accepted_answers=accepted,
    )
    logger.info(
        "evaluation_complete fields=%s failed=%s diagnostics=%s",
        len(fields),
        list(result.error_map()),
        len(diagnostics),
    )
    return result


def validate_submission(
    form: FormDefinition | Any,
    data: Mapping[str, Any] | None,
    *,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    """Run complete mode; return the accepted answers or raise SubmissionRejected."""
    result = evaluate_complete(form, data, config=config)
    if not result.ok:
        raise SubmissionRejected(result)
    return dict(result.accepted_answers or {})


__all__ = ["evaluate_partial", "evaluate_complete", "validate_submission"]
