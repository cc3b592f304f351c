"""Context management for tool handlers.

This module provides async-safe context management using contextvars, so
tool handlers can reach the server that is invoking them without global
state.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Iterator

from .constants import ErrorMessage

if TYPE_CHECKING:
    from .server import MCPServer
    from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

# Context variable to store the invoking server instance
_server_context: ContextVar["MCPServer | None"] = ContextVar(
    "server_context", default=None
)


class HandlerContext:
    """Context manager for tool handler functions.

    Provides access to server dependencies without global state.
    """

    @staticmethod
    def get() -> "MCPServer | None":
        """Get the server instance from context.

        Returns:
            MCPServer instance if set, None otherwise
        """
        return _server_context.get()

    @staticmethod
    @contextmanager
    def scope(server: "MCPServer") -> Iterator["MCPServer"]:
        """Bind ``server`` for the duration of a ``with`` block."""
        token = _server_context.set(server)
        try:
            yield server
        finally:
            _server_context.reset(token)

    @staticmethod
    def get_tool_registry() -> "ToolRegistry":
        """Get the tool registry of the server in context.

        Returns:
            ToolRegistry instance

        Raises:
            RuntimeError: If server context is not set
        """
        server = _server_context.get()
        if server is None:
            raise RuntimeError(
                f"{ErrorMessage.SERVER_CONTEXT_NOT_SET}. Cannot access tool registry."
            )
        return server.tool_registry


def get_server() -> "MCPServer | None":
    """Get server instance from context (convenience function).

    Returns:
        MCPServer instance if set, None otherwise
    """
    return HandlerContext.get()


def get_tool_registry() -> "ToolRegistry":
    """Get tool registry from context (convenience function).

    Raises:
        RuntimeError: If context not set
    """
    return HandlerContext.get_tool_registry()
