"""singularity-mcp: MCP server exposing the Singularity task manager REST API."""

from singularity_mcp.adapter import ResourceAdapter
from singularity_mcp.api import ApiClient
from singularity_mcp.config import VERSION
from singularity_mcp.entities import ENTITY_SCHEMAS
from singularity_mcp.exceptions import AdapterError, ConfigError, TransportError, ValidationError
from singularity_mcp.server import SingularityMcpServer

__all__ = [
    "VERSION",
    "ApiClient",
    "ResourceAdapter",
    "SingularityMcpServer",
    "ENTITY_SCHEMAS",
    "AdapterError",
    "ConfigError",
    "TransportError",
    "ValidationError",
]
