"""Form definition loading.

Turns the form-storage wire shape into a frozen `FormDefinition`, rejecting
definitions that cannot be evaluated before any evaluation starts:
- cyclic structures (a container reachable from itself)
- condition groups nested deeper than `max_condition_depth`
- anything the pydantic models refuse (unknown types or actions, duplicate
  ids, incomplete matrix configuration)

Every rejection is a `MalformedDefinitionError` whose `code` is the token the
model validators put in front of their messages.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging
import re

from pydantic import ValidationError as PydanticValidationError

from formlogic.config import EngineConfig
from formlogic.logic.errors import MalformedDefinitionError
from formlogic.models.form_definition import FormDefinition

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(r"^(?:Value error, )?([a-z_]+):")


def _extract_field_list(raw: Any) -> List[Any]:
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if isinstance(raw, Mapping):
        for key in ("properties", "fields"):
            if isinstance(raw.get(key), (list, tuple)):
                return list(raw[key])
    raise MalformedDefinitionError(
        "definition_invalid",
        "form definition must be a list of fields or an object with 'properties'",
    )


def _is_group(node: Mapping[str, Any]) -> bool:
    return "children" in node or "operatorIdentifier" in node or "combinator" in node


def _check_structure(fields_raw: List[Any], max_depth: int) -> None:
    """Walk each field iteratively, rejecting cycles and over-deep condition trees."""
    for field in fields_raw:
        field_id = str(field.get("id")) if isinstance(field, Mapping) else None
        stack: List[Tuple[Any, frozenset, int]] = [(field, frozenset(), 0)]
        while stack:
            node, ancestors, group_depth = stack.pop()
            if not isinstance(node, (Mapping, list, tuple)):
                continue
            if id(node) in ancestors:
                raise MalformedDefinitionError(
                    "definition_cyclic",
                    "field definition contains a reference cycle",
                    field_id=field_id,
                )
            if isinstance(node, Mapping) and _is_group(node):
                group_depth += 1
                if group_depth > max_depth:
                    raise MalformedDefinitionError(
                        "definition_too_deep",
                        f"condition groups nest deeper than {max_depth} levels",
                        field_id=field_id,
                    )
            path = ancestors | {id(node)}
            children = node.values() if isinstance(node, Mapping) else node
            for child in children:
                stack.append((child, path, group_depth))


def _classify(
    exc: PydanticValidationError, fields_raw: List[Any]
) -> Tuple[str, Optional[str], str]:
    """Return (code, field_id, detail) for the first pydantic error."""
    errors = exc.errors(include_url=False)
    first = errors[0] if errors else {"msg": str(exc), "loc": ()}
    msg = str(first.get("msg", ""))
    match = _CODE_RE.match(msg)
    code = match.group(1) if match else "definition_invalid"
    field_id: Optional[str] = None
    loc = tuple(first.get("loc") or ())
    if len(loc) >= 2 and loc[0] == "properties" and isinstance(loc[1], int):
        candidate = fields_raw[loc[1]] if loc[1] < len(fields_raw) else None
        if isinstance(candidate, Mapping) and candidate.get("id") is not None:
            field_id = str(candidate["id"])
    return code, field_id, msg


def _public_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors(include_url=False)
    ]


def load_form_definition(raw: Any, *, config: Optional[EngineConfig] = None) -> FormDefinition:
    """Parse and check a form definition; raise MalformedDefinitionError when unusable."""
    if isinstance(raw, FormDefinition):
        return raw
    cfg = config or EngineConfig()
    fields_raw = _extract_field_list(raw)
    _check_structure(fields_raw, cfg.max_condition_depth)
    try:
        form = FormDefinition(properties=fields_raw)
    except PydanticValidationError as e:
        code, field_id, detail = _classify(e, fields_raw)
        logger.warning("form_definition_rejected code=%s field_id=%s detail=%s", code, field_id, detail)
        raise MalformedDefinitionError(code, detail, field_id=field_id, errors=_public_errors(e)) from e
    logger.info(
        "form_definition_loaded fields=%s with_logic=%s",
        len(form.properties),
        sum(1 for f in form.properties if f.logic is not None),
    )
    return form


__all__ = ["load_form_definition"]
