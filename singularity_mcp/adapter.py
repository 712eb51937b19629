"""Generic resource adapter: one EntitySchema -> REST calls, MCP tools, MCP resources.

Every entity gets the same five tools (list/get/create/update/delete, plus
bulk delete where the schema declares it) and the same resources (a
collection, an item template, and any parent-scoped collections).
"""

import asyncio
import inspect
import logging
import urllib.parse
from typing import Annotated, Any, Optional

from pydantic import Field, WithJsonSchema

from singularity_mcp import formatters
from singularity_mcp.api import clean_params
from singularity_mcp.exceptions import AdapterError, ValidationError
from singularity_mcp.schema import object_json_schema, validate_payload

logger = logging.getLogger("singularity_mcp.adapter")

_MIME_JSON = "application/json"


def first_value(value):
    """Collapse a URI template variable to a single value.

    A variable that matched more than once arrives as a list; the first
    match wins. This mirrors the routing layer's behaviour and is an
    assumption, not a guarantee.
    """
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _param(name, annotation, default=inspect.Parameter.empty):
    return inspect.Parameter(
        name, inspect.Parameter.KEYWORD_ONLY, default=default, annotation=annotation
    )


def _with_signature(fn, name, params):
    """Attach an explicit signature to a ``**kwargs`` handler.

    FastMCP derives tool input schemas and URI template parameters from
    ``inspect.signature``, so the generated handler must advertise the
    entity's real parameter names.
    """
    fn.__signature__ = inspect.Signature(params)
    fn.__annotations__ = {p.name: p.annotation for p in params}
    fn.__name__ = name
    fn.__qualname__ = name
    return fn


class ResourceAdapter:
    """CRUD operations and MCP registration for one entity kind."""

    def __init__(self, schema, client):
        self.schema = schema
        self.client = client

    # -----------------------------------------------------------------------
    # REST operations
    # -----------------------------------------------------------------------

    def _item_path(self, entity_id):
        if not isinstance(entity_id, str) or not entity_id:
            raise ValidationError(self.schema.noun, ["id must be a non-empty string"])
        return f"{self.schema.path}/{urllib.parse.quote(entity_id, safe='')}"

    def list(self, filters=None):
        """GET the collection with whitelisted, cleaned filters."""
        allowed = self.schema.filter_names
        params = {k: v for k, v in (filters or {}).items() if k in allowed}
        return self.client.get(self.schema.path, params=clean_params(params))

    def get(self, entity_id):
        return self.client.get(self._item_path(entity_id))

    def create(self, fields):
        body = validate_payload(self.schema.noun, self.schema.fields, fields)
        return self.client.post(self.schema.path, body=body)

    def update(self, fields):
        """PATCH ``{path}/{id}``; the id moves into the path and out of the body."""
        body = validate_payload(self.schema.noun, self.schema.update_fields(), fields)
        entity_id = body.pop("id")
        return self.client.patch(self._item_path(entity_id), body=body)

    def delete(self, entity_id):
        self.client.delete(self._item_path(entity_id))
        return {"message": f"{self.schema.noun.capitalize()} {entity_id} successfully deleted"}

    def delete_bulk(self, filters=None):
        if not self.schema.bulk_delete_filters:
            raise AdapterError(f"[ERROR] Bulk delete is not supported for {self.schema.noun_plural}")
        allowed = {f.name for f in self.schema.bulk_delete_filters}
        params = {k: v for k, v in (filters or {}).items() if k in allowed}
        result = self.client.delete(self.schema.path, params=clean_params(params))
        if result is None:
            return {"message": f"Matching {self.schema.noun_plural} successfully deleted"}
        return result

    # -----------------------------------------------------------------------
    # Tool handlers
    # -----------------------------------------------------------------------

    async def _run_tool(self, tool_name, operation, *args):
        """Run a blocking operation off the event loop and wrap the outcome."""
        try:
            result = await asyncio.to_thread(operation, *args)
        except Exception as e:
            logger.error("Error running %s: %s", tool_name, e)
            return formatters.error(e)
        return formatters.success(result)

    def _filter_tool(self, tool_name, filters, operation):
        async def handler(**kwargs):
            return await self._run_tool(tool_name, operation, kwargs)

        params = [
            _param(
                f.name,
                Annotated[Optional[f.python_type()], Field(description=f.description)],
                default=None,
            )
            for f in filters
        ]
        return _with_signature(handler, tool_name, params)

    def _id_tool(self, tool_name, operation):
        async def handler(**kwargs):
            return await self._run_tool(tool_name, operation, kwargs.get("id"))

        annotation = Annotated[str, Field(description=f"{self.schema.title} ID")]
        return _with_signature(handler, tool_name, [_param("id", annotation)])

    def _payload_tool(self, tool_name, fields, operation):
        key = self.schema.payload_key

        async def handler(**kwargs):
            return await self._run_tool(tool_name, operation, kwargs.get(key))

        annotation = Annotated[dict[str, Any], WithJsonSchema(object_json_schema(fields))]
        return _with_signature(handler, tool_name, [_param(key, annotation)])

    def tool_handlers(self):
        """Return ``{operation: (tool name, title, description, handler)}``."""
        s = self.schema
        names = s.tool_names
        tools = {
            "create": (
                names["create"],
                f"Create {s.title}",
                s.create_description or f"Creates a new {s.noun}",
                self._payload_tool(names["create"], s.fields, self.create),
            ),
            "update": (
                names["update"],
                f"Update {s.title}",
                f"Updates an existing {s.noun}",
                self._payload_tool(names["update"], s.update_fields(), self.update),
            ),
            "delete": (
                names["delete"],
                f"Delete {s.title}",
                f"Deletes a {s.noun}",
                self._id_tool(names["delete"], self.delete),
            ),
            "get": (
                names["get"],
                f"Get {s.title}",
                f"Gets a {s.noun} by ID",
                self._id_tool(names["get"], self.get),
            ),
            "list": (
                names["list"],
                f"List {s.title_plural}",
                s.list_description or f"Lists all {s.noun_plural}",
                self._filter_tool(names["list"], s.filters, self.list),
            ),
        }
        if s.bulk_delete_filters:
            tools["delete_bulk"] = (
                names["delete_bulk"],
                f"Delete Bulk {s.title_plural}",
                f"Bulk delete {s.noun_plural} by filters",
                self._filter_tool(names["delete_bulk"], s.bulk_delete_filters, self.delete_bulk),
            )
        return tools

    def register_tools(self, mcp):
        for name, title, description, handler in self.tool_handlers().values():
            mcp.add_tool(
                handler,
                name=name,
                title=title,
                description=description,
                structured_output=False,
            )

    # -----------------------------------------------------------------------
    # Resource readers
    # -----------------------------------------------------------------------

    async def _read(self, label, operation, *args):
        """Resource reads re-raise so the hosting layer reports the failure."""
        try:
            data = await asyncio.to_thread(operation, *args)
        except Exception as e:
            logger.error("Error reading %s: %s", label, e)
            raise
        return formatters.resource_text(data)

    def collection_reader(self):
        async def read_collection():
            return await self._read(self.schema.noun_plural, self.list, {})

        read_collection.__name__ = f"read_{self.schema.collection_resource}"
        return read_collection

    def item_reader(self):
        async def read_item(**variables):
            entity_id = first_value(variables.get("id"))
            return await self._read(f"{self.schema.noun} {entity_id}", self.get, entity_id)

        return _with_signature(
            read_item, f"read_{self.schema.item_resource}", [_param("id", str)]
        )

    def scope_reader(self, scope):
        async def read_scope(**variables):
            parent_id = first_value(variables.get(scope.variable))
            label = f"{self.schema.noun_plural} for {scope.variable} {parent_id}"
            return await self._read(label, self.list, {scope.variable: parent_id})

        return _with_signature(read_scope, f"read_{scope.name}", [_param(scope.variable, str)])

    def register_resources(self, mcp, scheme):
        s = self.schema
        base = f"{scheme}://"
        mcp.resource(
            base + s.collection_uri,
            name=s.collection_resource,
            title=s.title_plural,
            description=s.collection_description or f"List of all available {s.noun_plural}",
            mime_type=_MIME_JSON,
        )(self.collection_reader())
        for scope in s.parent_scopes:
            mcp.resource(
                base + scope.uri,
                name=scope.name,
                title=scope.title,
                description=scope.description,
                mime_type=_MIME_JSON,
            )(self.scope_reader(scope))
        mcp.resource(
            base + s.item_uri,
            name=s.item_resource,
            title=s.title,
            description=f"{s.title} details by ID",
            mime_type=_MIME_JSON,
        )(self.item_reader())
