"""Form logic endpoints.

Implements:
- POST /forms/states
  - Resolves visibility and required-ness for every field
- POST /forms/answers
  - Complete mode: validates the whole submission and returns the accepted
    answers (visible fields only)
  - With `Precognition-Validate-Only: id1,id2`: partial mode, validating only
    the listed fields against the full submission

Both routes are stateless: the form definition travels with each request.
"""

from __future__ import annotations

from typing import List
import logging

from fastapi import APIRouter, Request, Response

from formlogic.config import EngineConfig
from formlogic.http.problem import dump_states
from formlogic.logic.definition_loader import load_form_definition
from formlogic.logic.errors import SubmissionRejected
from formlogic.logic.field_state import resolve_states
from formlogic.logic.orchestrator import evaluate_complete, evaluate_partial
from formlogic.models.api import FormEvaluationRequest

router = APIRouter()
logger = logging.getLogger(__name__)

PRECOGNITION_VALIDATE_ONLY = "Precognition-Validate-Only"
SUBMISSION_SAVED = "Form submission saved."


def _engine_config(request: Request) -> EngineConfig:
    cfg = getattr(request.app.state, "config", None)
    return cfg.engine if cfg is not None else EngineConfig()


def _validate_only(request: Request) -> List[str]:
    raw = request.headers.get(PRECOGNITION_VALIDATE_ONLY) or ""
    return [part.strip() for part in raw.split(",") if part.strip()]


@router.post(
    "/forms/states",
    summary="Resolve visibility and required-ness for every field",
    operation_id="resolveFieldStates",
)
def resolve_form_states(body: FormEvaluationRequest, request: Request) -> dict:
    cfg = _engine_config(request)
    form = load_form_definition(body.form, config=cfg)
    states = resolve_states(form, body.data, config=cfg)
    return {"states": dump_states(states)}


@router.post(
    "/forms/answers",
    summary="Validate answers, either the full submission or selected fields",
    operation_id="submitFormAnswers",
)
def submit_form_answers(body: FormEvaluationRequest, request: Request, response: Response) -> dict:
    cfg = _engine_config(request)
    field_ids = _validate_only(request)
    if field_ids:
        result = evaluate_partial(body.form, body.data, field_ids, config=cfg)
        response.headers["Precognition"] = "true"
        if not result.ok:
            raise SubmissionRejected(result)
        return {
            "type": "success",
            "states": dump_states(result.states),
            "fields": {fid: r.model_dump() for fid, r in result.fields.items()},
        }

    result = evaluate_complete(body.form, body.data, config=cfg)
    if not result.ok:
        raise SubmissionRejected(result)
    logger.info("submission_accepted answers=%s", len(result.accepted_answers or {}))
    return {
        "type": "success",
        "message": SUBMISSION_SAVED,
        "accepted_answers": result.accepted_answers,
        "states": dump_states(result.states),
    }


__all__ = ["router", "PRECOGNITION_VALIDATE_ONLY"]
