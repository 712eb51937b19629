"""Response envelopes for MCP tool results and resource contents."""

from __future__ import annotations

import json
from typing import Any

from mcp.types import CallToolResult, TextContent


def to_text(data: Any) -> str:
    """Render *data* as the text of a tool or resource response.

    Strings pass through verbatim; everything else is pretty-printed JSON,
    falling back to ``str()`` for values JSON cannot encode.
    """
    if isinstance(data, str):
        return data
    try:
        return json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(data)


def error_message(err: Any) -> str:
    """Extract a display message from an exception, string, or error mapping."""
    if isinstance(err, str):
        return err
    if isinstance(err, BaseException):
        return str(err) or type(err).__name__
    if isinstance(err, dict) and "message" in err:
        return f"Error {err.get('code')}: {err['message']}"
    return str(err)


def success(data: Any) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=to_text(data))], isError=False)


def error(err: Any) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=error_message(err))], isError=True
    )


def resource_text(data: Any) -> str:
    """Text body for a resource read (always JSON, even for strings)."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)
