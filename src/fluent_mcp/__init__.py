"""Chainable MCP server with schema introspection and dual-revision tool listing."""

from .server import MCPServer, create_server
from .context import HandlerContext, get_server, get_tool_registry
from .decorators import handle_errors
from .constants import ResponseStatus, ErrorCode, ErrorMessage
from .errors import ToolNotFoundError
from .protocol import ProtocolRevision, ProtocolNegotiator, NegotiationState
from .schema import SchemaKind, SchemaNode, describe, describe_fields, is_optional
from .tools import ToolRegistry, ToolRegistryEntry, build_tool_list

__all__ = [
    "MCPServer",
    "create_server",
    "HandlerContext",
    "get_server",
    "get_tool_registry",
    "handle_errors",
    "ResponseStatus",
    "ErrorCode",
    "ErrorMessage",
    "ToolNotFoundError",
    "ProtocolRevision",
    "ProtocolNegotiator",
    "NegotiationState",
    "SchemaKind",
    "SchemaNode",
    "describe",
    "describe_fields",
    "is_optional",
    "ToolRegistry",
    "ToolRegistryEntry",
    "build_tool_list",
]
