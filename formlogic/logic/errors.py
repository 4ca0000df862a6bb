"""Exceptions raised by the form logic engine.

Only definition problems and aggregated submission failures raise. Bad
submission data (missing keys, wrong shapes) never does.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from formlogic.models.evaluation import EvaluationResult


class MalformedDefinitionError(ValueError):
    """A form definition that cannot be evaluated; rejected at load time."""

    def __init__(
        self,
        code: str,
        detail: str,
        *,
        field_id: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(f"{code}: {detail}")
        self.code = code
        self.detail = detail
        self.field_id = field_id
        self.errors = list(errors or [])


class SubmissionRejected(ValueError):
    """A complete-mode evaluation found at least one validation error."""

    def __init__(self, result: "EvaluationResult") -> None:
        self.result = result
        self.errors: Dict[str, List[str]] = result.error_map()
        super().__init__(result.first_error_message() or "submission rejected")


__all__ = ["MalformedDefinitionError", "SubmissionRejected"]
