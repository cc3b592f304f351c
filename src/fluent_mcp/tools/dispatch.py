"""Tool invocation.

Arguments are validated against the tool's pydantic model, which fills in
defaults, and handlers are called with the resulting fields as keyword
arguments. Handlers may be plain functions or coroutines.
"""

import inspect
import json
import logging
from typing import Any

from ..decorators import handle_errors
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


def to_call_result(result: Any) -> dict[str, Any]:
    """Normalize a handler return value into an MCP call-tool result.

    Results that already carry ``content`` are returned as-is; strings become
    a single text block and anything else is serialized to JSON text.
    """
    if isinstance(result, dict) and "content" in result:
        return result
    if isinstance(result, str):
        text = result
    else:
        text = json.dumps(result, indent=2, default=str)
    return {"content": [{"type": "text", "text": text}]}


@handle_errors
async def invoke_tool(
    registry: ToolRegistry,
    name: str,
    arguments: dict[str, Any],
) -> dict[str, Any]:
    """Invoke a registered tool.

    Args:
        registry: Registry holding the tool
        name: Tool name
        arguments: Tool arguments

    Returns:
        Call-tool result dictionary, or an error envelope from ``handle_errors``
    """
    entry = registry.resolve(name)
    logger.info(f"Invoking tool: {name}")

    if entry.validator is not None:
        # ValidationError is a ValueError and surfaces as INVALID_INPUT
        arguments = dict(entry.validator.model_validate(arguments))

    result = entry.handler(**arguments)
    if inspect.isawaitable(result):
        result = await result
    return to_call_result(result)
