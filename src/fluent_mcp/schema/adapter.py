"""Adapter from pydantic / typing annotations to schema nodes.

Accepted inputs:

- ``SchemaNode`` instances (returned as-is)
- ``pydantic.BaseModel`` subclasses
- typing annotations (``str``, ``list[int]``, ``Optional[str]``,
  ``Literal["a", "b"]``, ``Annotated[str, Field(min_length=3)]`` ...)
- ``pydantic.fields.FieldInfo`` carrying an annotation
- ``(annotation, default)`` / ``(annotation, Field(...))`` pairs, the field
  definition format of ``pydantic.create_model``

Anything else has no schema tag and maps to ``None``.
"""

import copy
import datetime
import decimal
import enum
import inspect
import logging
import types
import typing
from collections import abc
from typing import Annotated, Any, Literal, Optional, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from .nodes import Check, CheckKind, SchemaKind, SchemaNode

logger = logging.getLogger(__name__)

_ARRAY_ORIGINS = (
    list,
    set,
    frozenset,
    tuple,
    abc.Sequence,
    abc.MutableSequence,
    abc.Set,
    abc.MutableSet,
    abc.Iterable,
)

_NUMBER_TYPES = (int, float, decimal.Decimal)


def _unknown() -> SchemaNode:
    return SchemaNode(kind=SchemaKind.UNKNOWN)


def to_schema_node(value: Any) -> Optional[SchemaNode]:
    """Map a schema value onto a ``SchemaNode``.

    Args:
        value: Schema value in any of the accepted forms

    Returns:
        SchemaNode, or None if ``value`` carries no recognizable schema tag
    """
    return _to_node(value, frozenset())


def model_description(model: Any) -> str:
    """Return the docstring of a pydantic model class, or an empty string."""
    if is_model_class(model) and model.__doc__:
        return inspect.cleandoc(model.__doc__)
    return ""


def is_model_class(value: Any) -> bool:
    return inspect.isclass(value) and issubclass(value, BaseModel)


def _to_node(value: Any, seen: frozenset) -> Optional[SchemaNode]:
    if isinstance(value, SchemaNode):
        return value

    if isinstance(value, FieldInfo):
        if value.annotation is None:
            return None
        node = _from_annotation(value.annotation, seen)
        return _apply_field_info(node, value) if node is not None else None

    # pydantic.create_model style field definition
    if isinstance(value, tuple) and len(value) == 2:
        annotation, default = value
        node = _to_node(annotation, seen)
        if node is None:
            return None
        if isinstance(annotation, SchemaNode):
            node = copy.deepcopy(node)
        if isinstance(default, FieldInfo):
            return _apply_field_info(node, default)
        if default is Ellipsis or default is PydanticUndefined:
            return node
        return node.with_default(default)

    return _from_annotation(value, seen)


def _from_annotation(tp: Any, seen: frozenset) -> Optional[SchemaNode]:
    origin = get_origin(tp)

    if origin is Annotated:
        base, *metadata = get_args(tp)
        node = _from_annotation(base, seen)
        if node is None:
            return None
        for item in metadata:
            if isinstance(item, FieldInfo):
                node = _apply_field_info(node, item)
            else:
                _apply_constraint(node.unwrap(), item)
        return node

    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        members = [arg for arg in args if arg is not type(None)]
        options = [_from_annotation(arg, seen) or _unknown() for arg in members]
        if len(options) == 1:
            node = options[0]
        else:
            node = SchemaNode(kind=SchemaKind.UNION, options=options)
        if len(members) < len(args):
            return node.optional()
        return node

    if origin is Literal:
        values = get_args(tp)
        if values and all(isinstance(v, str) for v in values):
            return SchemaNode(kind=SchemaKind.ENUM, values=list(values))
        return _unknown()

    if origin in _ARRAY_ORIGINS:
        args = get_args(tp)
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            # fixed-length tuples have no single element schema
            return _unknown()
        element = _from_annotation(args[0], seen) if args else None
        return SchemaNode(kind=SchemaKind.ARRAY, element=element or _unknown())

    if origin is not None:
        return _unknown()

    if tp is Any or isinstance(tp, typing.TypeVar):
        return _unknown()

    if not inspect.isclass(tp):
        return None

    return _from_class(tp, seen)


def _from_class(cls: type, seen: frozenset) -> SchemaNode:
    # Enum before the scalar checks: IntEnum and StrEnum subclass int/str
    if issubclass(cls, enum.Enum):
        values = [member.value for member in cls]
        if values and all(isinstance(v, str) for v in values):
            return SchemaNode(kind=SchemaKind.ENUM, values=values)
        return _unknown()
    if issubclass(cls, bool):
        return SchemaNode(kind=SchemaKind.BOOLEAN)
    if issubclass(cls, str):
        return SchemaNode(kind=SchemaKind.STRING)
    if issubclass(cls, _NUMBER_TYPES):
        return SchemaNode(kind=SchemaKind.NUMBER)
    if issubclass(cls, datetime.date):
        return SchemaNode(kind=SchemaKind.DATE)
    if issubclass(cls, BaseModel):
        return _from_model(cls, seen)
    if cls in (list, set, frozenset, tuple):
        return SchemaNode(kind=SchemaKind.ARRAY, element=_unknown())
    return _unknown()


def _from_model(model: type[BaseModel], seen: frozenset) -> SchemaNode:
    if model in seen:
        logger.debug(f"Recursive reference to {model.__name__}, not expanding")
        return _unknown()
    seen = seen | {model}

    fields: dict[str, SchemaNode] = {}
    for name, info in model.model_fields.items():
        node = _from_annotation(info.annotation, seen)
        if node is None:
            node = _unknown()
        fields[name] = _apply_field_info(node, info)

    return SchemaNode(
        kind=SchemaKind.OBJECT,
        description=model_description(model) or None,
        fields=fields,
    )


def _apply_field_info(node: SchemaNode, info: FieldInfo) -> SchemaNode:
    """Fold a FieldInfo's description, constraints and default into ``node``."""
    target = node.unwrap()
    if info.description:
        target.description = info.description
    for item in info.metadata:
        _apply_constraint(target, item)

    if info.default_factory is not None:
        try:
            return node.with_default(info.get_default(call_default_factory=True))
        except Exception as e:
            logger.debug(f"Default factory failed, treating field as optional: {e}")
            return node if node.kind == SchemaKind.OPTIONAL else node.optional()
    if info.default is not PydanticUndefined:
        return node.with_default(info.default)
    return node


def _apply_constraint(target: SchemaNode, item: Any) -> None:
    # MinLen / MaxLen / Len from annotated_types and pydantic's StringConstraints
    min_length = getattr(item, "min_length", None)
    if isinstance(min_length, int):
        target.checks.append(Check(CheckKind.MIN, min_length))
    max_length = getattr(item, "max_length", None)
    if isinstance(max_length, int):
        target.checks.append(Check(CheckKind.MAX, max_length))
