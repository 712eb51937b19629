"""Tests for adapter.py: REST mapping, tool handlers, and resource readers.

Mocks at ApiClient level. Verifies each operation hits the right path with
the right params and that failures become error results.
"""

import asyncio
import inspect
import json
from unittest.mock import MagicMock

import pytest

from singularity_mcp.adapter import ResourceAdapter, first_value
from singularity_mcp.entities import schema_by_name
from singularity_mcp.exceptions import AdapterError, TransportError, ValidationError


def _adapter(name, **client_returns):
    client = MagicMock()
    for method, value in client_returns.items():
        getattr(client, method).return_value = value
    return ResourceAdapter(schema_by_name(name), client), client


def _handler(adapter, operation):
    return adapter.tool_handlers()[operation][3]


class TestFirstValue:
    def test_scalar(self):
        assert first_value("a") == "a"

    def test_list_takes_first(self):
        assert first_value(["a", "b"]) == "a"

    def test_empty_list(self):
        assert first_value([]) is None


# ---------------------------------------------------------------------------
# REST operations
# ---------------------------------------------------------------------------


class TestOperations:
    def test_list_forwards_whitelisted_filters(self):
        adapter, client = _adapter("Project", get=[{"id": "P-1"}])
        result = adapter.list({"includeArchived": True, "maxCount": None, "secret": "x"})
        assert result == [{"id": "P-1"}]
        client.get.assert_called_once_with("/v2/project", params={"includeArchived": True})

    def test_habit_list_drops_unsupported_filters(self):
        adapter, client = _adapter("Habit", get=[])
        adapter.list({"maxCount": 3, "includeRemoved": True})
        client.get.assert_called_once_with("/v2/habit", params={"maxCount": 3})

    def test_get_quotes_id(self):
        adapter, client = _adapter("Task", get={"id": "a/b"})
        adapter.get("a/b")
        client.get.assert_called_once_with("/v2/task/a%2Fb")

    def test_get_rejects_empty_id(self):
        adapter, client = _adapter("Task")
        with pytest.raises(ValidationError):
            adapter.get("")
        client.get.assert_not_called()

    def test_create_posts_validated_body(self):
        adapter, client = _adapter("Task", post={"id": "T-1", "title": "Buy milk"})
        result = adapter.create({"title": "Buy milk", "priority": 1, "unknown": True})
        assert result["id"] == "T-1"
        client.post.assert_called_once_with("/v2/task", body={"title": "Buy milk", "priority": 1})

    def test_create_invalid_sends_nothing(self):
        adapter, client = _adapter("Task")
        with pytest.raises(ValidationError) as exc_info:
            adapter.create({"priority": 1})
        assert "title is required" in str(exc_info.value)
        client.post.assert_not_called()

    def test_update_moves_id_to_path(self):
        adapter, client = _adapter("Tag", patch={"id": "G-1", "title": "Home"})
        adapter.update({"id": "G-1", "title": "Home"})
        client.patch.assert_called_once_with("/v2/tag/G-1", body={"title": "Home"})

    def test_update_requires_id(self):
        adapter, client = _adapter("Tag")
        with pytest.raises(ValidationError):
            adapter.update({"title": "Home"})
        client.patch.assert_not_called()

    def test_note_update_requires_content(self):
        adapter, client = _adapter("Note")
        with pytest.raises(ValidationError) as exc_info:
            adapter.update({"id": "N-1", "containerId": "T-1"})
        assert exc_info.value.problems == ["content is required"]

    def test_delete_message(self):
        adapter, client = _adapter("KanbanStatus", delete=None)
        assert adapter.delete("K-1") == {"message": "Kanban status K-1 successfully deleted"}
        client.delete.assert_called_once_with("/v2/kanban-status/K-1")

    def test_delete_bulk(self):
        adapter, client = _adapter("TimeStat", delete=None)
        result = adapter.delete_bulk({"dateFrom": "2024-01-01", "dateTo": "", "maxCount": 4})
        assert result == {"message": "Matching time statistics entries successfully deleted"}
        client.delete.assert_called_once_with(
            "/v2/time-stat", params={"dateFrom": "2024-01-01"}
        )

    def test_delete_bulk_passes_api_result(self):
        adapter, _ = _adapter("TimeStat", delete={"deleted": 3})
        assert adapter.delete_bulk({}) == {"deleted": 3}

    def test_delete_bulk_unsupported(self):
        adapter, client = _adapter("Task")
        with pytest.raises(AdapterError):
            adapter.delete_bulk({})
        client.delete.assert_not_called()


# ---------------------------------------------------------------------------
# Tool handlers
# ---------------------------------------------------------------------------


class TestToolHandlers:
    def test_task_tools(self):
        adapter, _ = _adapter("Task")
        names = {op: entry[0] for op, entry in adapter.tool_handlers().items()}
        assert names == {
            "create": "createTask",
            "update": "updateTask",
            "delete": "deleteTask",
            "get": "getTask",
            "list": "listTasks",
        }

    def test_list_signature_exposes_filters(self):
        adapter, _ = _adapter("Task")
        params = inspect.signature(_handler(adapter, "list")).parameters
        assert list(params) == list(adapter.schema.filter_names)
        assert all(p.default is None for p in params.values())

    def test_payload_signature_uses_payload_key(self):
        adapter, _ = _adapter("HabitProgress")
        params = inspect.signature(_handler(adapter, "create")).parameters
        assert list(params) == ["progress"]

    def test_list_projects(self):
        adapter, client = _adapter("Project", get=[{"id": "P-1", "title": "Home"}])
        result = asyncio.run(_handler(adapter, "list")(includeArchived=True))
        assert result.isError is False
        assert json.loads(result.content[0].text) == [{"id": "P-1", "title": "Home"}]
        client.get.assert_called_once_with("/v2/project", params={"includeArchived": True})

    def test_create_task(self):
        adapter, client = _adapter("Task", post={"id": "T-9", "title": "Write report"})
        result = asyncio.run(_handler(adapter, "create")(task={"title": "Write report"}))
        assert result.isError is False
        assert json.loads(result.content[0].text)["id"] == "T-9"

    def test_delete_returns_message(self):
        adapter, _ = _adapter("Habit", delete=None)
        result = asyncio.run(_handler(adapter, "delete")(id="H-1"))
        assert json.loads(result.content[0].text) == {
            "message": "Habit H-1 successfully deleted"
        }

    def test_bulk_delete_time_stats(self):
        adapter, client = _adapter("TimeStat", delete=None)
        handler = _handler(adapter, "delete_bulk")
        result = asyncio.run(handler(relatedTaskId="T-1", dateFrom=None, dateTo=None))
        assert result.isError is False
        client.delete.assert_called_once_with("/v2/time-stat", params={"relatedTaskId": "T-1"})

    def test_validation_error_becomes_error_result(self):
        adapter, client = _adapter("Task")
        result = asyncio.run(_handler(adapter, "create")(task={"note": "no title"}))
        assert result.isError is True
        assert "title is required" in result.content[0].text
        client.post.assert_not_called()

    def test_transport_error_becomes_error_result(self):
        adapter, client = _adapter("Project")
        client.get.side_effect = TransportError(
            "[ERROR] HTTP 404: Not Found (status=404)", status=404
        )
        result = asyncio.run(_handler(adapter, "get")(id="missing"))
        assert result.isError is True
        assert result.content[0].text == "[ERROR] HTTP 404: Not Found (status=404)"


# ---------------------------------------------------------------------------
# Resource readers
# ---------------------------------------------------------------------------


class TestResourceReaders:
    def test_collection(self):
        adapter, client = _adapter("Tag", get=[{"id": "G-1"}])
        text = asyncio.run(adapter.collection_reader()())
        assert json.loads(text) == [{"id": "G-1"}]
        client.get.assert_called_once_with("/v2/tag", params={})

    def test_item_uses_first_id(self):
        adapter, client = _adapter("Task", get={"id": "a"})
        asyncio.run(adapter.item_reader()(id=["a", "b"]))
        client.get.assert_called_once_with("/v2/task/a")

    def test_scope_filters_by_parent(self):
        adapter, client = _adapter("Task", get=[])
        scope = adapter.schema.parent_scopes[0]
        asyncio.run(adapter.scope_reader(scope)(projectId="P-1"))
        client.get.assert_called_once_with("/v2/task", params={"projectId": "P-1"})

    def test_reader_reraises(self):
        adapter, client = _adapter("Note")
        client.get.side_effect = TransportError("[ERROR] HTTP 500", status=500)
        with pytest.raises(TransportError):
            asyncio.run(adapter.item_reader()(id="N-1"))

    def test_item_reader_signature(self):
        adapter, _ = _adapter("Note")
        assert list(inspect.signature(adapter.item_reader()).parameters) == ["id"]
