"""Helpers to compute visibility deltas and suppressed answers.

Used by live renderers after an answer changes: given the state map from
before and after the change, report which fields appeared, which vanished,
and which of the vanished ones still hold an answer that a complete-mode
submission would drop.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from formlogic.logic.value_canonical import lookup
from formlogic.models.evaluation import FieldState, VisibilityDelta


def compute_visibility_delta(
    before: Mapping[str, FieldState],
    after: Mapping[str, FieldState],
    data: Mapping[str, Any] | None = None,
) -> VisibilityDelta:
    """Compute visibility delta and suppressed answers.

    - now_visible: fields visible after but not before
    - now_hidden: fields visible before but not after
    - suppressed_answers: subset of now_hidden with a non-null submitted value

    Field ids absent from `before` count as previously hidden, so the first
    render reports every visible field as newly visible. Lists keep the order
    of `after` (document order), then any ids only present in `before`.
    """
    was_visible = {fid for fid, s in before.items() if s.visible}
    is_visible = {fid for fid, s in after.items() if s.visible}

    now_visible = [fid for fid in after if fid in is_visible and fid not in was_visible]
    ordered_ids = list(after) + [fid for fid in before if fid not in after]
    now_hidden = [fid for fid in ordered_ids if fid in was_visible and fid not in is_visible]

    suppressed_answers: List[str] = [
        fid for fid in now_hidden if lookup(data, fid) is not None
    ]
    return VisibilityDelta(
        now_visible=now_visible,
        now_hidden=now_hidden,
        suppressed_answers=suppressed_answers,
    )


__all__ = ["compute_visibility_delta"]
