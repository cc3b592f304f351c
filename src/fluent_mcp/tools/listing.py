"""Tool listing responses.

Every tool is advertised in both protocol shapes at once:

- legacy (2024-11-05): ``description`` and ``inputSchema`` at the top level
- modern (2025-03-26): an ``annotations`` object holding the description
  with every ``inputSchema`` key merged in

Clients of either revision pick the fields they understand, so the
negotiated revision does not change the payload.
"""

import copy
import logging
from typing import Any, Iterable

from ..protocol import ProtocolRevision
from .registry import ToolRegistryEntry

logger = logging.getLogger(__name__)


def build_tool_entry(entry: ToolRegistryEntry) -> dict[str, Any]:
    input_schema = copy.deepcopy(entry.input_schema)
    return {
        "name": entry.name,
        "description": entry.description,
        "inputSchema": input_schema,
        "annotations": {
            "description": entry.description,
            **copy.deepcopy(input_schema),
        },
    }


def build_tool_list(
    entries: Iterable[ToolRegistryEntry],
    revision: ProtocolRevision = ProtocolRevision.MODERN,
) -> list[dict[str, Any]]:
    """Build the tool-list payload.

    Args:
        entries: Registry entries in registry order
        revision: Negotiated protocol revision. Accepted for the session's
            record only; both shapes are always emitted.

    Returns:
        One dictionary per entry, in the given order
    """
    tools = [build_tool_entry(entry) for entry in entries]
    revision_tag = getattr(revision, "value", revision)
    logger.debug(f"Built tool list with {len(tools)} tools (revision {revision_tag})")
    return tools
