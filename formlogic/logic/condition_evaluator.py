"""Condition Evaluator: boolean evaluation of condition trees.

Groups combine their children with AND/OR and short-circuit. An empty AND
is True and an empty OR is False; a tree with no leaves at all is treated
as "no condition" by `conditions_hold`, which is what field logic uses.

Evaluation is total. A leaf whose referenced field no longer exists (or
whose type changed since the condition was authored) is False and reported
as a `stale_reference` diagnostic. Groups nested past `max_depth` fail
closed to False instead of recursing further. Matrix answers are read
through the referenced field, so row keys it does not configure are
ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging

from formlogic.logic.comparator import compare
from formlogic.logic.diagnostics import DEPTH_EXCEEDED, STALE_REFERENCE, DiagnosticCollector
from formlogic.logic.value_canonical import known_rows, lookup, normalize_value
from formlogic.models.form_definition import (
    ConditionGroup,
    ConditionLeaf,
    FormDefinition,
)
from formlogic.models.field_type import ValueShape
from formlogic.models.operators import Combinator

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class _Context:
    data: Mapping[str, Any]
    form: Optional[FormDefinition]
    owner_id: str
    diagnostics: DiagnosticCollector
    max_depth: int


def evaluate(
    group: ConditionGroup,
    data: Mapping[str, Any] | None,
    *,
    form: Optional[FormDefinition] = None,
    owner_id: str = "",
    diagnostics: Optional[DiagnosticCollector] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> bool:
    """Evaluate a condition group against submission data.

    When `form` is given, leaves are resolved against the current field list
    so stale references can be detected; otherwise the type captured on the
    leaf is trusted.
    """
    ctx = _Context(
        data=data if isinstance(data, Mapping) else {},
        form=form,
        owner_id=owner_id,
        diagnostics=diagnostics if diagnostics is not None else DiagnosticCollector(),
        max_depth=max_depth,
    )
    result = _eval_group(group, ctx, 1)
    logger.debug("condition_evaluated owner_id=%s result=%s", owner_id, result)
    return result


def conditions_hold(
    group: Optional[ConditionGroup],
    data: Mapping[str, Any] | None,
    **kwargs: Any,
) -> bool:
    """Evaluate field-logic conditions; a tree without leaves always holds."""
    if group is None or group.leaf_count() == 0:
        return True
    return evaluate(group, data, **kwargs)


def _eval_group(group: ConditionGroup, ctx: _Context, depth: int) -> bool:
    if depth > ctx.max_depth:
        ctx.diagnostics.report(
            DEPTH_EXCEEDED,
            ctx.owner_id,
            f"condition nesting exceeds {ctx.max_depth} levels",
        )
        return False
    if group.combinator == Combinator.OR:
        return any(_eval_node(child, ctx, depth) for child in group.children)
    return all(_eval_node(child, ctx, depth) for child in group.children)


def _eval_node(node: ConditionGroup | ConditionLeaf, ctx: _Context, depth: int) -> bool:
    if isinstance(node, ConditionGroup):
        return _eval_group(node, ctx, depth + 1)
    return _eval_leaf(node, ctx)


def _eval_leaf(leaf: ConditionLeaf, ctx: _Context) -> bool:
    ref_id = leaf.field_ref.id
    declared_type = (leaf.field_ref.type or "").strip().lower() or None
    field_type = declared_type
    value = lookup(ctx.data, ref_id)
    if ctx.form is not None:
        target = ctx.form.get(ref_id)
        if target is None:
            ctx.diagnostics.report(
                STALE_REFERENCE, ctx.owner_id, "referenced field does not exist", ref_id=ref_id
            )
            return False
        if declared_type is not None and declared_type != target.type:
            ctx.diagnostics.report(
                STALE_REFERENCE,
                ctx.owner_id,
                f"referenced field changed type from '{declared_type}' to '{target.type}'",
                ref_id=ref_id,
            )
            return False
        field_type = target.type
        if target.shape == ValueShape.MAPPING:
            value = known_rows(normalize_value(target.type, value), target.rows)
    return compare(
        leaf.operator,
        field_type or "",
        value,
        leaf.comparison_value,
        diagnostics=ctx.diagnostics,
        field_id=ctx.owner_id,
        ref_id=ref_id,
    )


__all__ = ["evaluate", "conditions_hold", "DEFAULT_MAX_DEPTH"]
