"""Schema node types.

A ``SchemaNode`` is the closed set of validation-schema shapes the
introspector understands. Validation libraries are mapped onto it by
:mod:`fluent_mcp.schema.adapter`, so the introspector never touches a
library's internals directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SchemaKind(str, Enum):
    """Discriminator tag for a schema node."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"
    DATE = "date"
    OPTIONAL = "optional"
    DEFAULT = "default"
    UNION = "union"
    # Tagged, but outside the set above (e.g. ``Any``, ``dict``)
    UNKNOWN = "unknown"


class CheckKind(str, Enum):
    """Validation check kinds carried by string nodes."""

    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class Check:
    """A single validation check, e.g. a minimum length."""

    kind: CheckKind
    value: int


@dataclass
class SchemaNode:
    """One node of a schema tree.

    Only the attributes relevant to ``kind`` are populated:

    - ``checks``: STRING
    - ``values``: ENUM
    - ``element``: ARRAY
    - ``fields``: OBJECT (ordered)
    - ``options``: UNION (ordered)
    - ``inner``: OPTIONAL and DEFAULT
    - ``default``: DEFAULT
    """

    kind: SchemaKind
    description: Optional[str] = None
    checks: list[Check] = field(default_factory=list)
    values: list[str] = field(default_factory=list)
    element: Optional["SchemaNode"] = None
    fields: dict[str, "SchemaNode"] = field(default_factory=dict)
    options: list["SchemaNode"] = field(default_factory=list)
    inner: Optional["SchemaNode"] = None
    default: Any = None

    @property
    def is_wrapper(self) -> bool:
        return self.kind in (SchemaKind.OPTIONAL, SchemaKind.DEFAULT)

    def unwrap(self) -> "SchemaNode":
        """Return the innermost node below any optional/default wrappers."""
        node = self
        while node.is_wrapper and node.inner is not None:
            node = node.inner
        return node

    def optional(self) -> "SchemaNode":
        return SchemaNode(kind=SchemaKind.OPTIONAL, inner=self)

    def with_default(self, value: Any) -> "SchemaNode":
        return SchemaNode(kind=SchemaKind.DEFAULT, inner=self, default=value)
