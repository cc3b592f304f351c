"""Tool registration system for fluent-mcp.

This module provides the tool registry and the tool-list response builder.
"""

from .registry import (
    ToolRegistry,
    ToolRegistryEntry,
    ToolNotFoundError,
    build_validator,
    extract_tool_info,
    register_tools,
)
from .listing import build_tool_entry, build_tool_list
from .dispatch import invoke_tool, to_call_result

__all__ = [
    "ToolRegistry",
    "ToolRegistryEntry",
    "ToolNotFoundError",
    "build_validator",
    "extract_tool_info",
    "register_tools",
    "build_tool_entry",
    "build_tool_list",
    "invoke_tool",
    "to_call_result",
]
