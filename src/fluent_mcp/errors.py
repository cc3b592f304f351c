"""Exceptions raised by fluent-mcp."""


class ToolNotFoundError(LookupError):
    """Raised when a tool name is not registered."""
