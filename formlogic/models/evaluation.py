"""Pydantic models for evaluation results.

These are value objects returned to callers; nothing here holds a
reference back to the form definition or the submission.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldState(BaseModel):
    model_config = ConfigDict(frozen=True)

    visible: bool
    required: bool


class ErrorMessage(BaseModel):
    """A validation error: stable machine reason plus rendered message."""

    reason: str
    message: str
    params: Dict[str, str] = Field(default_factory=dict)


class Diagnostic(BaseModel):
    """Operator-facing note raised during evaluation (never shown to end users)."""

    kind: str
    field_id: str
    detail: str
    ref_id: Optional[str] = None


class FieldResult(BaseModel):
    visible: bool
    required: bool
    errors: List[ErrorMessage] = Field(default_factory=list)


class EvaluationResult(BaseModel):
    mode: Literal["partial", "complete"]
    states: Dict[str, FieldState]
    fields: Dict[str, FieldResult]
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    accepted_answers: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return not any(r.errors for r in self.fields.values())

    def error_map(self) -> Dict[str, List[str]]:
        """Return `{field_id: [message, ...]}` for fields with errors, in field order."""
        return {
            fid: [e.message for e in result.errors]
            for fid, result in self.fields.items()
            if result.errors
        }

    def first_error_message(self) -> Optional[str]:
        for result in self.fields.values():
            if result.errors:
                return result.errors[0].message
        return None


class VisibilityDelta(BaseModel):
    now_visible: List[str]
    now_hidden: List[str]
    suppressed_answers: List[str] = Field(default_factory=list)


__all__ = [
    "FieldState",
    "ErrorMessage",
    "Diagnostic",
    "FieldResult",
    "EvaluationResult",
    "VisibilityDelta",
]
