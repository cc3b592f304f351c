"""Tests for the pydantic / typing to schema node adapter."""

import datetime
import decimal
from enum import Enum, IntEnum
from typing import Annotated, Literal, Optional, Sequence

import pytest
from pydantic import BaseModel, Field, StringConstraints

from fluent_mcp.schema import Check, CheckKind, SchemaKind, SchemaNode, to_schema_node
from fluent_mcp.schema.adapter import model_description


class Color(str, Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


class TreeNode(BaseModel):
    name: str
    children: list["TreeNode"] = []


class Note(BaseModel):
    """A short note.

    Notes are stored as plain text.
    """

    text: str


@pytest.mark.unit
class TestScalarMapping:
    """Test mapping of scalar Python types."""

    def test_bool_is_not_number(self):
        assert to_schema_node(bool).kind == SchemaKind.BOOLEAN

    @pytest.mark.parametrize("tp", [int, float, decimal.Decimal])
    def test_numbers(self, tp):
        assert to_schema_node(tp).kind == SchemaKind.NUMBER

    def test_string(self):
        assert to_schema_node(str).kind == SchemaKind.STRING

    @pytest.mark.parametrize("tp", [datetime.date, datetime.datetime])
    def test_dates(self, tp):
        assert to_schema_node(tp).kind == SchemaKind.DATE

    def test_non_type_has_no_tag(self):
        assert to_schema_node("text") is None
        assert to_schema_node(None) is None
        assert to_schema_node(3.5) is None


@pytest.mark.unit
class TestEnumMapping:
    """Test Literal and Enum mapping."""

    def test_literal(self):
        node = to_schema_node(Literal["a", "b"])
        assert node.kind == SchemaKind.ENUM
        assert node.values == ["a", "b"]

    def test_str_enum(self):
        node = to_schema_node(Color)
        assert node.kind == SchemaKind.ENUM
        assert node.values == ["red", "green", "blue"]

    def test_int_enum_is_unknown(self):
        assert to_schema_node(Priority).kind == SchemaKind.UNKNOWN

    def test_non_string_literal_is_unknown(self):
        assert to_schema_node(Literal[1, 2]).kind == SchemaKind.UNKNOWN


@pytest.mark.unit
class TestContainerMapping:
    """Test array and union mapping."""

    @pytest.mark.parametrize("tp", [list[int], set[int], Sequence[int], tuple[int, ...]])
    def test_homogeneous_containers(self, tp):
        node = to_schema_node(tp)
        assert node.kind == SchemaKind.ARRAY
        assert node.element.kind == SchemaKind.NUMBER

    def test_bare_list(self):
        node = to_schema_node(list)
        assert node.kind == SchemaKind.ARRAY
        assert node.element.kind == SchemaKind.UNKNOWN

    def test_optional_wraps(self):
        node = to_schema_node(Optional[int])
        assert node.kind == SchemaKind.OPTIONAL
        assert node.inner.kind == SchemaKind.NUMBER

    def test_union_options_in_order(self):
        node = to_schema_node(int | str | None)
        assert node.kind == SchemaKind.OPTIONAL
        assert [option.kind for option in node.inner.options] == [
            SchemaKind.NUMBER,
            SchemaKind.STRING,
        ]


@pytest.mark.unit
class TestConstraints:
    """Test length constraints and descriptions."""

    def test_field_constraints(self):
        node = to_schema_node(Annotated[str, Field(min_length=2, max_length=5)])
        assert node.checks == [Check(CheckKind.MIN, 2), Check(CheckKind.MAX, 5)]

    def test_string_constraints(self):
        node = to_schema_node(Annotated[str, StringConstraints(max_length=8)])
        assert node.checks == [Check(CheckKind.MAX, 8)]

    def test_description_on_optional_lands_on_inner(self):
        node = to_schema_node(Annotated[Optional[str], Field(description="Nickname")])
        assert node.kind == SchemaKind.OPTIONAL
        assert node.inner.description == "Nickname"


@pytest.mark.unit
class TestFieldDefinitions:
    """Test (annotation, default) pairs and FieldInfo."""

    def test_required_markers(self):
        assert to_schema_node((str, ...)).kind == SchemaKind.STRING

    def test_default_pair(self):
        node = to_schema_node((int, 5))
        assert node.kind == SchemaKind.DEFAULT
        assert node.default == 5
        assert node.inner.kind == SchemaKind.NUMBER

    def test_none_default(self):
        node = to_schema_node((Optional[str], None))
        assert node.kind == SchemaKind.DEFAULT
        assert node.default is None

    def test_pair_with_non_schema_annotation(self):
        assert to_schema_node(("not a type", 1)) is None

    def test_pair_does_not_mutate_schema_node(self):
        base = SchemaNode(kind=SchemaKind.STRING)
        to_schema_node((base, Field(description="changed")))
        assert base.description is None

    def test_default_factory(self):
        node = to_schema_node((list[str], Field(default_factory=list)))
        assert node.kind == SchemaKind.DEFAULT
        assert node.default == []

    def test_schema_node_passthrough(self):
        node = SchemaNode(kind=SchemaKind.STRING)
        assert to_schema_node(node) is node


@pytest.mark.unit
class TestModelMapping:
    """Test pydantic model mapping."""

    def test_model_fields_in_order(self):
        node = to_schema_node(Note)
        assert node.kind == SchemaKind.OBJECT
        assert list(node.fields) == ["text"]

    def test_model_description_from_docstring(self):
        assert to_schema_node(Note).description == (
            "A short note.\n\nNotes are stored as plain text."
        )
        assert model_description(Note) == to_schema_node(Note).description

    def test_model_without_docstring(self):
        assert to_schema_node(TreeNode).description is None

    def test_recursive_model_does_not_loop(self):
        node = to_schema_node(TreeNode)
        children = node.fields["children"]
        assert children.kind == SchemaKind.DEFAULT
        assert children.inner.kind == SchemaKind.ARRAY
        assert children.inner.element.kind == SchemaKind.UNKNOWN
