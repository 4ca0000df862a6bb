"""Conditional logic and validation engine for form submissions.

The engine decides, per field, whether it is visible and required given the
answers submitted so far, then validates the answers of visible fields.
Business logic lives in `formlogic/logic/`, value objects in
`formlogic/models/`. `create_app` builds a thin FastAPI adapter over the
same functions.
"""

from __future__ import annotations

from formlogic.logic import (
    MalformedDefinitionError,
    SubmissionRejected,
    compute_visibility_delta,
    evaluate_complete,
    evaluate_partial,
    load_form_definition,
    validate_submission,
)
from formlogic.main import create_app

__all__ = [
    "create_app",
    "load_form_definition",
    "evaluate_partial",
    "evaluate_complete",
    "validate_submission",
    "compute_visibility_delta",
    "MalformedDefinitionError",
    "SubmissionRejected",
]
