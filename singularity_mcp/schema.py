"""
Declarative entity schemas and the generic payload validator.

An EntitySchema describes one REST resource kind: where it lives, which
fields a payload may carry, and which query filters the API understands.
The adapter reads nothing else, so adding an entity means appending one
EntitySchema to ``entities.ENTITY_SCHEMAS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from singularity_mcp.exceptions import ValidationError


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"
    ANY = "any"


@dataclass(frozen=True)
class FieldSpec:
    """One payload or filter field."""

    name: str
    type: FieldType
    required: bool = False
    enum: tuple[str, ...] = ()
    items: FieldType | None = None
    description: str | None = None

    def json_schema(self) -> dict[str, Any]:
        if self.type is FieldType.ENUM:
            schema: dict[str, Any] = {"type": "string", "enum": list(self.enum)}
        elif self.type is FieldType.ARRAY:
            schema = {"type": "array", "items": _scalar_schema(self.items or FieldType.ANY)}
        else:
            schema = _scalar_schema(self.type)
        if self.description:
            schema["description"] = self.description
        return schema

    def python_type(self):
        """Annotation used for flat tool parameters (list filters)."""
        return _PYTHON_TYPES[self.type]


def _scalar_schema(ftype: FieldType) -> dict[str, Any]:
    if ftype is FieldType.ANY:
        return {}
    return {"type": ftype.value}


_PYTHON_TYPES = {
    FieldType.STRING: str,
    FieldType.NUMBER: int | float,
    FieldType.BOOLEAN: bool,
    FieldType.ENUM: str,
    FieldType.ARRAY: list,
    FieldType.ANY: Any,
}


# ---------------------------------------------------------------------------
# Field constructors (keep the entity tables short)
# ---------------------------------------------------------------------------


def string(name, required=False, description=None):
    return FieldSpec(name, FieldType.STRING, required, description=description)


def number(name, required=False, description=None):
    return FieldSpec(name, FieldType.NUMBER, required, description=description)


def boolean(name, required=False, description=None):
    return FieldSpec(name, FieldType.BOOLEAN, required, description=description)


def one_of(name, values, required=False, description=None):
    return FieldSpec(name, FieldType.ENUM, required, enum=tuple(values), description=description)


def array_of(name, items, required=False, description=None):
    return FieldSpec(name, FieldType.ARRAY, required, items=items, description=description)


def any_value(name, required=False, description=None):
    return FieldSpec(name, FieldType.ANY, required, description=description)


# ---------------------------------------------------------------------------
# Entity schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParentScope:
    """A collection resource filtered by one parent id, e.g. tasks of a project."""

    name: str
    title: str
    uri: str
    variable: str
    description: str


@dataclass(frozen=True)
class EntitySchema:
    name: str
    plural: str
    title: str
    title_plural: str
    noun: str
    noun_plural: str
    path: str
    collection_uri: str
    item_uri: str
    collection_resource: str
    item_resource: str
    payload_key: str
    fields: tuple[FieldSpec, ...]
    filters: tuple[FieldSpec, ...]
    update_required: frozenset[str] = frozenset()
    parent_scopes: tuple[ParentScope, ...] = ()
    bulk_delete_filters: tuple[FieldSpec, ...] = ()
    collection_description: str = ""
    list_description: str = ""
    create_description: str = ""

    @property
    def tool_names(self) -> dict[str, str]:
        """Operation -> MCP tool name, e.g. ``{"list": "listTasks", ...}``."""
        names = {
            "list": f"list{self.plural}",
            "get": f"get{self.name}",
            "create": f"create{self.name}",
            "update": f"update{self.name}",
            "delete": f"delete{self.name}",
        }
        if self.bulk_delete_filters:
            names["delete_bulk"] = f"deleteBulk{self.plural}"
        return names

    @property
    def filter_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.filters)

    def update_fields(self) -> tuple[FieldSpec, ...]:
        """Fields for an update payload: ``id`` required, the rest optional
        unless listed in ``update_required``."""
        rest = tuple(
            FieldSpec(
                f.name,
                f.type,
                f.name in self.update_required,
                f.enum,
                f.items,
                f.description,
            )
            for f in self.fields
        )
        return (string("id", required=True),) + rest


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _type_problem(spec: FieldSpec, value) -> str | None:
    t = spec.type
    if t is FieldType.ANY:
        return None
    if t is FieldType.STRING:
        return None if isinstance(value, str) else f"{spec.name} must be a string"
    if t is FieldType.NUMBER:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        return None if ok else f"{spec.name} must be a number"
    if t is FieldType.BOOLEAN:
        return None if isinstance(value, bool) else f"{spec.name} must be a boolean"
    if t is FieldType.ENUM:
        if value in spec.enum:
            return None
        return f"{spec.name} must be one of: {', '.join(spec.enum)}"
    if t is FieldType.ARRAY:
        if not isinstance(value, list):
            return f"{spec.name} must be an array"
        item_spec = FieldSpec(f"{spec.name}[]", spec.items or FieldType.ANY)
        for item in value:
            problem = _type_problem(item_spec, item)
            if problem:
                return problem
        return None
    return f"{spec.name} has unsupported type {t}"


def validate_payload(entity: str, fields, payload) -> dict[str, Any]:
    """Check *payload* against *fields* and return the cleaned body.

    Unknown keys are dropped and ``None`` counts as absent. Raises
    ValidationError listing every problem found.
    """
    if not isinstance(payload, dict):
        raise ValidationError(entity, [f"expected an object, got {type(payload).__name__}"])
    problems: list[str] = []
    cleaned: dict[str, Any] = {}
    for spec in fields:
        value = payload.get(spec.name)
        if value is None:
            if spec.required:
                problems.append(f"{spec.name} is required")
            continue
        problem = _type_problem(spec, value)
        if problem:
            problems.append(problem)
            continue
        cleaned[spec.name] = value
    if problems:
        raise ValidationError(entity, problems)
    return cleaned


def object_json_schema(fields) -> dict[str, Any]:
    """JSON Schema for an object payload built from FieldSpecs."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {f.name: f.json_schema() for f in fields},
    }
    required = [f.name for f in fields if f.required]
    if required:
        schema["required"] = required
    return schema
