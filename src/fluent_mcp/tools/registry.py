"""Tool registry for fluent-mcp.

This module implements the ordered tool registry that backs tool listing and
tool dispatch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, create_model
from pydantic.fields import FieldInfo

from ..constants import DEFAULT_TOOL_VERSION, ErrorMessage
from ..errors import ToolNotFoundError
from ..schema import (
    SchemaKind,
    SchemaNode,
    describe,
    describe_fields,
    is_model_class,
    to_schema_node,
)

logger = logging.getLogger(__name__)


@dataclass
class ToolRegistryEntry:
    """Metadata for a registered tool."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable
    version: str = DEFAULT_TOOL_VERSION
    tags: list[str] = field(default_factory=list)
    # Parses tool arguments before the handler runs; None passes them through
    validator: Optional[type[BaseModel]] = None


class ToolRegistry:
    """Registry for managing MCP tools.

    Entries are kept in first-registration order. Registering a name that
    already exists replaces the entry in place: the new metadata takes over
    the old entry's position in listings.
    """

    def __init__(self):
        """Initialize empty tool registry."""
        self._tools: dict[str, ToolRegistryEntry] = {}
        logger.debug("Tool registry initialized")

    def register(
        self,
        name: str,
        handler: Callable,
        input_schema: dict[str, Any],
        description: str = "",
        version: str = DEFAULT_TOOL_VERSION,
        tags: list[str] | None = None,
        validator: Optional[type[BaseModel]] = None,
    ) -> ToolRegistryEntry:
        """Register a tool in the registry.

        Args:
            name: Tool name (unique key)
            handler: Callable that implements the tool
            input_schema: Structural description of the tool arguments
            description: Human readable tool description
            version: Tool version (default: "1.0.0")
            tags: List of tags for categorization
            validator: pydantic model the arguments are validated against

        Returns:
            The stored ToolRegistryEntry
        """
        entry = ToolRegistryEntry(
            name=name,
            description=description or "",
            input_schema=input_schema,
            handler=handler,
            version=version,
            tags=tags or [],
            validator=validator,
        )

        if name in self._tools:
            logger.warning(f"Tool '{name}' already registered, replacing it")
        # dict assignment keeps the position of an existing key
        self._tools[name] = entry

        logger.info(f"Registered tool: {name} v{version}")
        return entry

    def get(self, name: str) -> ToolRegistryEntry | None:
        """Get tool entry by name.

        Args:
            name: Tool name

        Returns:
            ToolRegistryEntry if found, None otherwise
        """
        return self._tools.get(name)

    def resolve(self, name: str) -> ToolRegistryEntry:
        """Get tool entry by name or raise ToolNotFoundError."""
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(f"{ErrorMessage.TOOL_NOT_FOUND}: '{name}'")
        return tool

    def get_all(self) -> list[ToolRegistryEntry]:
        """Get all entries in registry order."""
        return list(self._tools.values())

    def list_tools(self) -> list[str]:
        return list(self._tools.keys())

    def count(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def extract_tool_info(schema: Any) -> tuple[str, dict[str, Any]]:
    """Turn the schema argument of a registration call into tool metadata.

    Args:
        schema: pydantic model class, mapping of field name to schema value,
            or any single schema value

    Returns:
        Tuple of (description, input_schema). The description comes from an
        object schema's own description (a model's docstring) and is empty
        otherwise.
    """
    if isinstance(schema, Mapping):
        return "", describe_fields(schema)

    try:
        node = to_schema_node(schema)
    except Exception as e:
        logger.debug(f"Schema adaptation failed, using object default: {e}")
        node = None

    description = ""
    if node is not None and node.kind == SchemaKind.OBJECT:
        description = node.description or ""

    return description, describe(node)


def build_validator(name: str, schema: Any) -> Optional[type[BaseModel]]:
    """Build the pydantic model that tool arguments are validated against.

    A model class is its own validator. A mapping of field name to schema
    value becomes a model created with ``pydantic.create_model`` that rejects
    unknown fields; entries that are not schema values are skipped, as in the
    advertised schema.

    Returns:
        Model class, or None when the schema cannot be validated with
        pydantic (bare ``SchemaNode`` trees, single annotations)
    """
    if is_model_class(schema):
        return schema
    if not isinstance(schema, Mapping):
        return None

    definitions: dict[str, Any] = {}
    for field_name, value in schema.items():
        if isinstance(value, FieldInfo):
            annotation, default = value.annotation, value
        elif isinstance(value, tuple) and len(value) == 2:
            annotation, default = value
        else:
            annotation, default = value, ...

        if isinstance(annotation, SchemaNode):
            logger.debug(f"Tool '{name}' field '{field_name}' has no pydantic type")
            return None
        node = to_schema_node(annotation)
        if node is None:
            continue
        if default is ... and node.kind == SchemaKind.OPTIONAL:
            # optional fields are advertised as not required
            default = None
        definitions[field_name] = (annotation, default)

    try:
        return create_model(
            f"{name}_arguments",
            __config__=ConfigDict(extra="forbid"),
            **definitions,
        )
    except Exception as e:
        logger.warning(f"Cannot build argument validator for tool '{name}': {e}")
        return None


def register_tools(
    tools: list[dict[str, Any]],
    registry: ToolRegistry,
) -> None:
    """Register multiple tools at once.

    Args:
        tools: List of tool dictionaries, each containing:
            - name: Tool name
            - handler: Handler function
            - schema: Schema value (model, field mapping or annotation)
            - description: Description (optional, overrides the schema's)
            - version: Version (optional)
            - tags: Tags (optional)
        registry: ToolRegistry to populate
    """
    for tool_config in tools:
        config = dict(tool_config)
        schema = config.pop("schema", None)
        schema_description, input_schema = extract_tool_info(schema)
        registry.register(
            input_schema=input_schema,
            description=config.pop("description", None) or schema_description,
            validator=build_validator(config["name"], schema),
            **config,
        )

    logger.info(f"Registered {len(tools)} tools")
