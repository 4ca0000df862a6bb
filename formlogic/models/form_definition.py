"""Pydantic models for form definitions and their condition trees.

Field objects arrive in the form builder's wire shape:

    {"id": "...", "type": "matrix", "required": true, "rows": [...],
     "logic": {"conditions": {"operatorIdentifier": "and", "children": [...]},
               "actions": ["require-answer"]}}

where each condition child is either a nested group or a leaf
`{"value": {"property_meta": {"id", "type"}, "operator", "value"}}`.
All models are frozen so a parsed definition can be shared read-only
between concurrent evaluations.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    PrivateAttr,
    Tag,
    field_validator,
    model_validator,
)

from formlogic.models.field_type import (
    KNOWN_FIELD_TYPES,
    FieldType,
    family_of,
    shape_of,
)
from formlogic.models.operators import Combinator, normalize_action, normalize_operator


class FieldRef(BaseModel):
    """Reference to another field, with the type captured at authoring time."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class ConditionLeaf(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_ref: FieldRef
    operator: str
    comparison_value: Any = None

    @model_validator(mode="before")
    @classmethod
    def unwrap_builder_envelope(cls, data: Any) -> Any:
        # Builder shape: {"value": {"property_meta": {...}, "operator": ..., "value": ...}}
        if isinstance(data, dict):
            inner = data.get("value")
            if isinstance(inner, dict) and "property_meta" in inner:
                return {
                    "field_ref": inner.get("property_meta"),
                    "operator": inner.get("operator"),
                    "comparison_value": inner.get("value"),
                }
        return data

    @field_validator("operator", mode="before")
    @classmethod
    def canonical_operator(cls, v: Any) -> str:
        token = normalize_operator(v)
        if not token:
            raise ValueError("missing_operator: condition has no operator")
        return token


def _node_kind(value: Any) -> str:
    if isinstance(value, ConditionGroup):
        return "group"
    if isinstance(value, dict) and (
        "children" in value or "operatorIdentifier" in value or "combinator" in value
    ):
        return "group"
    return "leaf"


ConditionNode = Annotated[
    Union[
        Annotated["ConditionGroup", Tag("group")],
        Annotated[ConditionLeaf, Tag("leaf")],
    ],
    Discriminator(_node_kind),
]


class ConditionGroup(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    combinator: str = Field(default=Combinator.AND, alias="operatorIdentifier")
    children: tuple[ConditionNode, ...] = ()

    @field_validator("combinator", mode="before")
    @classmethod
    def canonical_combinator(cls, v: Any) -> str:
        token = str(v or Combinator.AND).strip().lower()
        if token not in {Combinator.AND, Combinator.OR}:
            raise ValueError(f"unknown_combinator: {v!r}")
        return token

    @field_validator("children", mode="before")
    @classmethod
    def null_children_are_empty(cls, v: Any) -> Any:
        return () if v is None else v

    def leaf_count(self) -> int:
        """Count leaves in the whole tree without recursion."""
        count = 0
        stack: list[ConditionGroup] = [self]
        while stack:
            group = stack.pop()
            for child in group.children:
                if isinstance(child, ConditionGroup):
                    stack.append(child)
                else:
                    count += 1
        return count


ConditionGroup.model_rebuild()


class FieldLogic(BaseModel):
    model_config = ConfigDict(frozen=True)

    conditions: ConditionGroup | None = None
    actions: tuple[str, ...] = ()

    @field_validator("conditions", mode="before")
    @classmethod
    def empty_conditions_are_none(cls, v: Any) -> Any:
        if v in (None, {}, []):
            return None
        return v

    @field_validator("actions", mode="before")
    @classmethod
    def canonical_actions(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, (list, tuple)):
            return v
        return tuple(normalize_action(item) for item in v)


def _option_label(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("name", item.get("id", "")))
    return str(item)


# Builder-specific range keys lifted onto min_value / max_value
_RANGE_KEYS = {
    FieldType.RATING: (None, "rating_max_value"),
    FieldType.SCALE: ("scale_min_value", "scale_max_value"),
    FieldType.SLIDER: ("slider_min_value", "slider_max_value"),
}


class FieldDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str | None = None
    type: str
    required: bool = False
    hidden: bool = False
    rows: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()
    required_rows: tuple[str, ...] = ()
    options: tuple[str, ...] = ()
    allow_creation: bool = False
    min_value: float | None = None
    max_value: float | None = None
    max_char_limit: int | None = None
    max_files: int | None = None
    logic: FieldLogic | None = None

    @model_validator(mode="before")
    @classmethod
    def lift_builder_config(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out = dict(data)
        ftype = str(out.get("type") or "").strip().lower()
        # select / multi_select keep their options under a key named after the type
        if not out.get("options") and isinstance(out.get(ftype), dict):
            out["options"] = out[ftype].get("options") or []
        if isinstance(out.get("options"), (list, tuple)):
            out["options"] = [_option_label(o) for o in out["options"]]
        for key in ("rows", "columns", "required_rows"):
            if isinstance(out.get(key), (list, tuple)):
                out[key] = [str(x) for x in out[key]]
        min_key, max_key = _RANGE_KEYS.get(ftype, (None, None))
        if min_key and out.get("min_value") is None and out.get(min_key) is not None:
            out["min_value"] = out[min_key]
        if max_key and out.get("max_value") is None and out.get(max_key) is not None:
            out["max_value"] = out[max_key]
        if out.get("id") is not None:
            out["id"] = str(out["id"])
        return out

    @field_validator("type", mode="before")
    @classmethod
    def known_type(cls, v: Any) -> str:
        token = str(v or "").strip().lower()
        if token not in KNOWN_FIELD_TYPES:
            raise ValueError(f"unknown_field_type: {v!r}")
        return token

    @model_validator(mode="after")
    def matrix_config_consistent(self) -> "FieldDefinition":
        if self.type != FieldType.MATRIX:
            return self
        if self.required and (not self.rows or not self.columns):
            raise ValueError(
                f"matrix_config_incomplete: required matrix '{self.id}' needs rows and columns"
            )
        unknown = [r for r in self.required_rows if r not in self.rows]
        if unknown:
            raise ValueError(
                f"matrix_config_incomplete: required_rows not in rows for '{self.id}': {unknown}"
            )
        return self

    @property
    def label(self) -> str:
        return self.name or self.id

    @property
    def shape(self) -> str:
        return shape_of(self.type)

    @property
    def family(self) -> str | None:
        return family_of(self.type)


class FormDefinition(BaseModel):
    """Ordered, immutable list of fields (the form record's `properties`)."""

    model_config = ConfigDict(frozen=True)

    properties: tuple[FieldDefinition, ...] = ()
    _field_map: dict[str, FieldDefinition] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def unique_ids(self) -> "FormDefinition":
        seen: set[str] = set()
        for field in self.properties:
            if field.id in seen:
                raise ValueError(f"duplicate_field_id: {field.id!r}")
            seen.add(field.id)
        return self

    def model_post_init(self, __context: Any) -> None:
        self._field_map = {f.id: f for f in self.properties}

    @property
    def field_map(self) -> dict[str, FieldDefinition]:
        return self._field_map

    def get(self, field_id: str) -> FieldDefinition | None:
        return self.field_map.get(field_id)


__all__ = [
    "FieldRef",
    "ConditionLeaf",
    "ConditionGroup",
    "ConditionNode",
    "FieldLogic",
    "FieldDefinition",
    "FormDefinition",
]
