"""Constants for fluent-mcp.

This module defines all constants, enums, and error messages used throughout
the server to avoid magic strings and improve maintainability.
"""

from enum import Enum


class ResponseStatus(str, Enum):
    """Response status values."""

    SUCCESS = "success"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error code identifiers for error categorization."""

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Dispatch errors
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"

    # Generic errors
    RUNTIME_ERROR = "RUNTIME_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class ErrorMessage:
    """Error message templates."""

    # Dispatch
    TOOL_NOT_FOUND = "Tool not found"

    # Context errors
    SERVER_CONTEXT_NOT_SET = "Server context not set"

    # Transport
    UNSUPPORTED_TRANSPORT = "Unsupported transport type"

    # Generic
    UNEXPECTED_ERROR = "Unexpected error occurred"


# Transport types the server can run on
SUPPORTED_TRANSPORTS = ("stdio", "sse")

DEFAULT_SERVER_NAME = "fluent-mcp"
DEFAULT_SERVER_VERSION = "1.0.0"
DEFAULT_TOOL_VERSION = "1.0.0"
