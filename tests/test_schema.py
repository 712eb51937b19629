"""Tests for schema.py: field specs, update fields, payload validation."""

import pytest

from singularity_mcp.entities import NOTE, TASK, TIME_STAT
from singularity_mcp.exceptions import ValidationError
from singularity_mcp.schema import (
    FieldType,
    array_of,
    boolean,
    number,
    object_json_schema,
    one_of,
    string,
    validate_payload,
)

FIELDS = (
    string("title", required=True),
    number("priority"),
    boolean("done"),
    one_of("color", ("red", "green")),
    array_of("tags", FieldType.STRING),
)


class TestFieldSpec:
    def test_scalar_schema(self):
        assert string("a").json_schema() == {"type": "string"}
        assert number("a", description="n").json_schema() == {"type": "number", "description": "n"}

    def test_enum_schema(self):
        assert one_of("c", ("red", "green")).json_schema() == {
            "type": "string",
            "enum": ["red", "green"],
        }

    def test_array_schema(self):
        assert array_of("t", FieldType.NUMBER).json_schema() == {
            "type": "array",
            "items": {"type": "number"},
        }

    def test_object_schema_lists_required(self):
        schema = object_json_schema(FIELDS)
        assert schema["type"] == "object"
        assert set(schema["properties"]) == {"title", "priority", "done", "color", "tags"}
        assert schema["required"] == ["title"]

    def test_object_schema_without_required(self):
        assert "required" not in object_json_schema((string("a"),))


class TestValidatePayload:
    def test_valid_payload_passes_through(self):
        payload = {"title": "x", "priority": 1, "done": False, "color": "red", "tags": ["a"]}
        assert validate_payload("task", FIELDS, payload) == payload

    def test_unknown_keys_dropped_and_none_is_absent(self):
        body = validate_payload("task", FIELDS, {"title": "x", "bogus": 1, "priority": None})
        assert body == {"title": "x"}

    def test_missing_required(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload("task", FIELDS, {"priority": 2})
        assert exc_info.value.problems == ["title is required"]

    def test_collects_every_problem(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload(
                "task",
                FIELDS,
                {"title": 5, "priority": "high", "done": "yes", "color": "blue", "tags": [1]},
            )
        problems = exc_info.value.problems
        assert "title must be a string" in problems
        assert "priority must be a number" in problems
        assert "done must be a boolean" in problems
        assert "color must be one of: red, green" in problems
        assert "tags[] must be a string" in problems

    def test_bool_is_not_a_number(self):
        with pytest.raises(ValidationError):
            validate_payload("task", (number("priority"),), {"priority": True})

    def test_float_is_a_number(self):
        assert validate_payload("t", (number("n"),), {"n": 1.5}) == {"n": 1.5}

    def test_non_object_payload(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_payload("task", FIELDS, ["title"])
        assert "expected an object, got list" in str(exc_info.value)


class TestEntitySchema:
    def test_tool_names(self):
        assert TASK.tool_names == {
            "list": "listTasks",
            "get": "getTask",
            "create": "createTask",
            "update": "updateTask",
            "delete": "deleteTask",
        }

    def test_bulk_tool_name(self):
        assert TIME_STAT.tool_names["delete_bulk"] == "deleteBulkTimeStats"

    def test_update_fields_require_id_only(self):
        fields = {f.name: f for f in TASK.update_fields()}
        assert fields["id"].required is True
        assert fields["title"].required is False

    def test_update_required_overrides(self):
        required = {f.name for f in NOTE.update_fields() if f.required}
        assert required == {"id", "containerId", "content"}
