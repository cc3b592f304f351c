"""MCP Server implementation for fluent-mcp.

This module implements the chainable MCP server: tool registration with
schema introspection, per-session protocol negotiation, tool listing in both
protocol shapes, and lifecycle management.
"""

import json
import logging
import sys
import time
from typing import Any, Callable, Optional

from mcp import types
from mcp.server.fastmcp import FastMCP

from .config import load_server_config
from .constants import (
    DEFAULT_SERVER_NAME,
    DEFAULT_SERVER_VERSION,
    DEFAULT_TOOL_VERSION,
    SUPPORTED_TRANSPORTS,
    ErrorMessage,
)
from .context import HandlerContext
from .protocol import (
    SUPPORTED_REVISIONS,
    ProtocolNegotiator,
    ProtocolRevision,
    SessionNegotiators,
)
from .tools import (
    ToolRegistry,
    build_tool_list,
    build_validator,
    extract_tool_info,
    invoke_tool,
)

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


class MCPServer:
    """Chainable MCP server.

    Tools are registered with a schema value (pydantic model, mapping of
    field name to annotation, or a single annotation) that is introspected
    into the advertised input schema::

        server = (
            create_server({"name": "notes"})
            .tool("echo", {"msg": str}, echo)
            .stdio()
        )
        await server.start()
    """

    def __init__(self, config: Optional[dict[str, Any]] = None):
        """Initialize MCP Server.

        Args:
            config: Server configuration dictionary. Should contain:
                - name: Server name (default: "fluent-mcp")
                - version: Server version (default: "1.0.0")
                - description: Server description
                - transport: Transport configuration (type, host, port)
                - logging: Logging configuration (level, format, file)
        """
        self.config = config or {}
        self.name = self.config.get("name", DEFAULT_SERVER_NAME)
        self.version = str(self.config.get("version", DEFAULT_SERVER_VERSION))
        self.description = self.config.get("description", "")

        # Transport configuration
        transport_config = self.config.get("transport") or {}
        self.transport_type = transport_config.get("type", "stdio")
        self.host = transport_config.get("host", "127.0.0.1")
        self.port = int(transport_config.get("port", 8000))

        # Logging configuration
        logging_config = self.config.get("logging") or {}
        self.log_level = logging_config.get("level", "INFO")
        self.log_format = logging_config.get("format", "json")
        self.log_file = logging_config.get("file")

        self.tool_registry = ToolRegistry()
        self.negotiators = SessionNegotiators()

        self._setup_logging()

        self.mcp = FastMCP(name=self.name, host=self.host, port=self.port)
        self._install_protocol_handlers()

        logger.info(f"Initialized {self.name} MCP Server v{self.version}")
        logger.info(f"Transport: {self.transport_type}")

    def _setup_logging(self) -> None:
        """Setup structured logging for the server."""
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, str(self.log_level).upper(), logging.INFO))

        # Remove existing handlers
        root_logger.handlers.clear()

        if self.log_format == "json":
            formatter: logging.Formatter = JSONFormatter()
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        # stdout carries protocol messages on stdio, so logs go to stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logger.info(f"Logging to file: {self.log_file}")

    def _install_protocol_handlers(self) -> None:
        """Route tool listing and tool calls through the tool registry."""
        lowlevel = self.mcp._mcp_server
        lowlevel.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        lowlevel.request_handlers[types.CallToolRequest] = self._handle_call_tool

    def _current_session(self) -> Any:
        try:
            return self.mcp._mcp_server.request_context.session
        except LookupError:
            return None

    def negotiator(self, session: Any = None) -> ProtocolNegotiator:
        """Get the protocol negotiator for a session.

        Args:
            session: Client session; defaults to the session of the request
                being handled

        Returns:
            ProtocolNegotiator for the session
        """
        if session is None:
            session = self._current_session()
        return self.negotiators.for_session(session)

    async def _handle_list_tools(self, request: types.ListToolsRequest) -> types.ServerResult:
        revision = self.negotiator().revision
        tools = [types.Tool.model_validate(tool) for tool in self.list_tools(revision)]
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def _handle_call_tool(self, request: types.CallToolRequest) -> types.ServerResult:
        result = await self.call_tool(request.params.name, request.params.arguments)
        if "content" in result:
            return types.ServerResult(types.CallToolResult.model_validate(result))
        return types.ServerResult(
            types.CallToolResult(
                content=[types.TextContent(type="text", text=json.dumps(result, indent=2))],
                isError=True,
            )
        )

    def tool(
        self,
        name: str,
        schema: Any,
        handler: Callable,
        description: Optional[str] = None,
        version: str = DEFAULT_TOOL_VERSION,
        tags: Optional[list[str]] = None,
    ) -> "MCPServer":
        """Register a tool.

        Args:
            name: Tool name; registering an existing name replaces that tool
            schema: pydantic model, mapping of field name to schema value,
                or a single schema value
            handler: Function or coroutine called with the validated tool arguments as
                keyword arguments
            description: Tool description. Defaults to the schema's own
                description (a model docstring)
            version: Tool version
            tags: Tags for categorization

        Returns:
            The server, for chaining
        """
        schema_description, input_schema = extract_tool_info(schema)
        self.tool_registry.register(
            name=name,
            handler=handler,
            input_schema=input_schema,
            description=description or schema_description,
            version=version,
            tags=tags,
            validator=build_validator(name, schema),
        )
        return self

    def stdio(self) -> "MCPServer":
        """Use the stdio transport."""
        self.transport_type = "stdio"
        return self

    def sse(self, host: Optional[str] = None, port: Optional[int] = None) -> "MCPServer":
        """Use the SSE transport."""
        self.transport_type = "sse"
        if host is not None:
            self.host = self.mcp.settings.host = host
        if port is not None:
            self.port = self.mcp.settings.port = int(port)
        return self

    def list_tools(
        self,
        revision: ProtocolRevision = ProtocolRevision.MODERN,
    ) -> list[dict[str, Any]]:
        """Build the tool-list payload for a negotiated revision."""
        return build_tool_list(self.tool_registry.get_all(), revision)

    async def call_tool(
        self,
        name: str,
        arguments: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Invoke a registered tool with this server bound in the handler context.

        Returns:
            Call-tool result with ``content``, or an error envelope
        """
        with HandlerContext.scope(self):
            return await invoke_tool(self.tool_registry, name, arguments or {})

    async def start(self) -> None:
        """Start the MCP server.

        This method runs the configured transport until the client
        disconnects or the process is interrupted.
        """
        logger.info("Starting MCP server...")

        if self.transport_type not in SUPPORTED_TRANSPORTS:
            raise ValueError(
                f"{ErrorMessage.UNSUPPORTED_TRANSPORT} '{self.transport_type}'. "
                f"Supported types: {', '.join(SUPPORTED_TRANSPORTS)}"
            )

        logger.info(f"✓ Registered {self.tool_registry.count()} tools")

        try:
            if self.transport_type == "stdio":
                logger.info("Server ready. Waiting for requests on stdio...")
                await self.mcp.run_stdio_async()
            else:
                logger.info(f"Server ready. Serving SSE on {self.host}:{self.port}")
                await self.mcp.run_sse_async()
        except KeyboardInterrupt:
            logger.info("Received interrupt signal. Shutting down...")
        except Exception as e:
            logger.error(f"Server error: {e}", exc_info=True)
            raise
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop the MCP server gracefully."""
        logger.info("Stopping MCP server...")
        logger.info("MCP server stopped")

    def get_capabilities(self) -> dict[str, Any]:
        """Get server capabilities declaration.

        Returns:
            Dictionary containing server capabilities information
        """
        return {
            "server": {
                "name": self.name,
                "version": self.version,
                "description": self.description,
            },
            "protocol": {
                "versions": list(SUPPORTED_REVISIONS),
                "default": ProtocolRevision.MODERN.value,
            },
            "capabilities": {
                "tools": {
                    "listChanged": True,
                },
            },
        }


def create_server(config: Optional[dict[str, Any]] = None) -> MCPServer:
    """Factory function to create an MCP server instance.

    Args:
        config: Server configuration dictionary. If None, configuration is
                loaded from config/server.yaml and environment variables

    Returns:
        MCPServer instance
    """
    if config is None:
        config = load_server_config()
    return MCPServer(config)

