"""Pydantic models for form definitions and evaluation results."""

from __future__ import annotations

from formlogic.models.evaluation import (
    Diagnostic,
    ErrorMessage,
    EvaluationResult,
    FieldResult,
    FieldState,
    VisibilityDelta,
)
from formlogic.models.field_type import FieldType
from formlogic.models.form_definition import (
    ConditionGroup,
    ConditionLeaf,
    FieldDefinition,
    FieldLogic,
    FieldRef,
    FormDefinition,
)
from formlogic.models.operators import Action, Combinator, Operator

__all__ = [
    "Action",
    "Combinator",
    "ConditionGroup",
    "ConditionLeaf",
    "Diagnostic",
    "ErrorMessage",
    "EvaluationResult",
    "FieldDefinition",
    "FieldLogic",
    "FieldRef",
    "FieldResult",
    "FieldState",
    "FieldType",
    "FormDefinition",
    "Operator",
    "VisibilityDelta",
]
