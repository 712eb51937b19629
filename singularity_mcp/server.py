"""MCP server facade: one ApiClient, one ResourceAdapter per entity, FastMCP transport.

Run: python -m singularity_mcp
"""

from __future__ import annotations

import logging

import anyio
from mcp.server.fastmcp import FastMCP

from singularity_mcp import config
from singularity_mcp.adapter import ResourceAdapter
from singularity_mcp.api import LOG_LEVEL_NUMBERS, ApiClient, normalize_log_level
from singularity_mcp.entities import ENTITY_SCHEMAS
from singularity_mcp.exceptions import ConfigError

logger = logging.getLogger("singularity_mcp.server")

INSTRUCTIONS = (
    "Singularity task manager tools. "
    "Each entity (project, taskGroup, task, note, kanbanStatus, kanbanTaskStatus, "
    "habit, habit progress, checklist item, tag, timeStat) has list/get/create/"
    "update/delete tools. Create and update take one object argument named after "
    "the entity (e.g. createTask(task={...})); update needs the id inside that "
    "object. Tool failures come back with isError=true and the API's message."
)


class SingularityMcpServer:
    """Owns the FastMCP instance and the shared ApiClient.

    Tokens and logging settings may change at any time; they apply to the
    next request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        access_token: str | None = None,
        enable_logging: bool | None = None,
        log_level: str | None = None,
        resource_scheme: str | None = None,
        timeout: float | None = None,
        host: str | None = None,
        port: int | None = None,
    ):
        self.enable_logging = config.LOG_ENABLED if enable_logging is None else enable_logging
        self.log_level = normalize_log_level(log_level or config.LOG_LEVEL)
        self.resource_scheme = resource_scheme or config.RESOURCE_SCHEME
        self._log_event("init", "Creating MCP server")

        self.mcp = FastMCP(
            config.SERVER_NAME,
            instructions=INSTRUCTIONS,
            host=host or config.MCP_HTTP_HOST,
            port=port or config.MCP_HTTP_PORT,
        )
        self.api_client = ApiClient(
            base_url=base_url,
            enable_logging=self.enable_logging,
            log_level=self.log_level,
            timeout=config.HTTP_TIMEOUT_SECONDS if timeout is None else timeout,
        )
        token = config.ACCESS_TOKEN if access_token is None else access_token
        if token:
            self._log_event("auth", "Setting access token")
            self.api_client.set_access_token(token)

        self.adapters = {
            schema.name: ResourceAdapter(schema, self.api_client) for schema in ENTITY_SCHEMAS
        }
        self.register_resources()
        self.register_tools()
        self._log_event("init", "Resources and tools registered")

    def _log_event(self, category, message, **data):
        if not self.enable_logging:
            return
        level = LOG_LEVEL_NUMBERS[self.log_level]
        if data:
            logger.log(level, "[%s] %s: %s", category, message, data)
        else:
            logger.log(level, "[%s] %s", category, message)

    def register_resources(self):
        for name, adapter in self.adapters.items():
            self._log_event("resources", f"Registering {name} resources")
            adapter.register_resources(self.mcp, self.resource_scheme)

    def register_tools(self):
        for name, adapter in self.adapters.items():
            self._log_event("tools", f"Registering {name} tools")
            adapter.register_tools(self.mcp)

    # -- runtime settings ---------------------------------------------------

    def set_access_token(self, token):
        self._log_event("auth", "Updating access token")
        self.api_client.set_access_token(token)

    def set_logging(self, enable):
        self.enable_logging = bool(enable)
        self.api_client.set_logging(enable)
        self._log_event("config", f"Logging {'enabled' if enable else 'disabled'}")

    def set_log_level(self, level):
        self.log_level = normalize_log_level(level)
        self.api_client.set_log_level(self.log_level)
        self._log_event("config", f"Log level set to {self.log_level}")

    def get_server(self) -> FastMCP:
        return self.mcp

    # -- lifecycle ----------------------------------------------------------

    async def connect(self, transport: str = "stdio"):
        """Serve over *transport* until the session ends. Failures are re-raised."""
        runners = {
            "stdio": self.mcp.run_stdio_async,
            "sse": self.mcp.run_sse_async,
            "streamable-http": self.mcp.run_streamable_http_async,
        }
        if transport not in runners:
            raise ConfigError(
                f"[ERROR] Unknown transport '{transport}'. Valid: {', '.join(config.TRANSPORTS)}"
            )
        self._log_event("connect", f"Serving on {transport} transport")
        try:
            await runners[transport]()
        except Exception as e:
            self._log_event("error", "Failed to connect to transport", error=str(e))
            raise
        self._log_event("connect", f"{transport} transport closed")

    def run(self, transport: str = "stdio"):
        """Blocking entry point used by the CLI."""
        anyio.run(self.connect, transport)
