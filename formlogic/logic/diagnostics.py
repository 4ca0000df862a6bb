"""Diagnostic kinds and the per-evaluation collector.

Diagnostics are the non-fatal channel for problems an operator should see
but an end user should not: stale field references, operators that do not
apply to a field type, and condition trees that hit the depth ceiling.
Each evaluation owns its own collector, so nothing is shared between calls.
"""

from __future__ import annotations

from typing import List, Optional
import logging

from formlogic.models.evaluation import Diagnostic

logger = logging.getLogger(__name__)

STALE_REFERENCE = "stale_reference"
UNSUPPORTED_OPERATOR = "unsupported_operator"
INVALID_COMPARISON_VALUE = "invalid_comparison_value"
DEPTH_EXCEEDED = "depth_exceeded"
UNKNOWN_FIELD_REQUESTED = "unknown_field_requested"


class DiagnosticCollector:
    """Collects diagnostics for a single evaluation call, in emission order."""

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []

    def report(self, kind: str, field_id: str, detail: str, *, ref_id: Optional[str] = None) -> None:
        logger.warning(
            "engine_diagnostic kind=%s field_id=%s ref_id=%s detail=%s",
            kind,
            field_id,
            ref_id,
            detail,
        )
        self._items.append(Diagnostic(kind=kind, field_id=field_id, detail=detail, ref_id=ref_id))

    @property
    def items(self) -> List[Diagnostic]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


__all__ = [
    "STALE_REFERENCE",
    "UNSUPPORTED_OPERATOR",
    "INVALID_COMPARISON_VALUE",
    "DEPTH_EXCEEDED",
    "UNKNOWN_FIELD_REQUESTED",
    "DiagnosticCollector",
]
