"""Schema introspection for tool input schemas."""

from .nodes import Check, CheckKind, SchemaKind, SchemaNode
from .adapter import to_schema_node, is_model_class
from .introspector import describe, describe_fields, is_optional

__all__ = [
    "Check",
    "CheckKind",
    "SchemaKind",
    "SchemaNode",
    "to_schema_node",
    "is_model_class",
    "describe",
    "describe_fields",
    "is_optional",
]
