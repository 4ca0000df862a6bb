"""Request bodies for the HTTP adapter."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


class FormEvaluationRequest(BaseModel):
    # Loaded and checked by the definition loader, not by request parsing,
    # so definition problems surface as 400 with a specific code.
    form: Any
    data: Dict[str, Any] = Field(default_factory=dict)


__all__ = ["FormEvaluationRequest"]
