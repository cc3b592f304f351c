"""Schema introspection.

Converts schema values into structural, JSON-Schema-like descriptions used to
advertise tool inputs. Conversion is total: malformed or unrecognized input
degrades to a minimal description instead of raising, so a tool can always be
registered and listed.
"""

import copy
import logging
from typing import Any, Mapping, Optional

from .adapter import to_schema_node
from .nodes import CheckKind, SchemaKind, SchemaNode

logger = logging.getLogger(__name__)


def describe(schema: Any) -> dict[str, Any]:
    """Describe a single schema value.

    Args:
        schema: SchemaNode, pydantic model class or typing annotation

    Returns:
        Structural description. ``{"type": "object"}`` when ``schema`` is
        None or carries no recognizable tag.
    """
    try:
        return _describe_node(to_schema_node(schema))
    except Exception as e:
        logger.debug(f"Schema introspection failed, using object default: {e}")
        return {"type": "object"}


def describe_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Describe a plain mapping of field name to schema value as an object.

    Entries whose value is not a schema value are skipped.
    """
    try:
        nodes: dict[str, SchemaNode] = {}
        for name, value in fields.items():
            node = to_schema_node(value)
            if node is None:
                logger.debug(f"Skipping field '{name}': not a schema value")
                continue
            nodes[name] = node
        return _describe_object(nodes)
    except Exception as e:
        logger.debug(f"Field introspection failed, using object default: {e}")
        return {"type": "object"}


def is_optional(schema: Any) -> bool:
    """Whether a field with this schema may be omitted by the caller.

    True for optional- and default-wrapped schemas.
    """
    try:
        node = to_schema_node(schema)
    except Exception:
        return False
    return node is not None and node.is_wrapper


def _describe_node(node: Optional[SchemaNode]) -> dict[str, Any]:
    if node is None:
        return {"type": "object"}

    kind = node.kind

    if kind == SchemaKind.STRING:
        result: dict[str, Any] = {"type": "string"}
        if node.description:
            result["description"] = node.description
        min_length = _first_check(node, CheckKind.MIN)
        if min_length is not None:
            result["minLength"] = min_length
        max_length = _first_check(node, CheckKind.MAX)
        if max_length is not None:
            result["maxLength"] = max_length
        return result

    if kind in (SchemaKind.NUMBER, SchemaKind.BOOLEAN):
        result = {"type": "number" if kind == SchemaKind.NUMBER else "boolean"}
        if node.description:
            result["description"] = node.description
        return result

    if kind == SchemaKind.ENUM:
        result = {"type": "string", "enum": list(node.values)}
        if node.description:
            result["description"] = node.description
        return result

    if kind == SchemaKind.ARRAY:
        return {"type": "array", "items": _describe_node(node.element)}

    if kind == SchemaKind.OBJECT:
        return _describe_object(node.fields)

    if kind == SchemaKind.UNION:
        return {"oneOf": [_describe_node(option) for option in node.options]}

    if kind == SchemaKind.DATE:
        return {"type": "string", "format": "date-time"}

    if kind == SchemaKind.DEFAULT:
        result = _describe_node(node.inner)
        try:
            # the wrapper's default overrides one carried by the inner schema
            result["default"] = copy.deepcopy(node.default)
        except Exception as e:
            logger.debug(f"Dropping default that cannot be copied: {e}")
        return result

    if kind == SchemaKind.OPTIONAL:
        return _describe_node(node.inner)

    return {"type": "string"}


def _describe_object(fields: Mapping[str, Optional[SchemaNode]]) -> dict[str, Any]:
    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, child in fields.items():
        properties[name] = _describe_node(child)
        if child is None or not child.is_wrapper:
            required.append(name)

    result: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        result["required"] = required
    result["additionalProperties"] = False
    return result


def _first_check(node: SchemaNode, kind: CheckKind) -> Optional[int]:
    for check in node.checks:
        if check.kind == kind:
            return check.value
    return None
