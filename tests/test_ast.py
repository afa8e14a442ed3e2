import json
from dataclasses import FrozenInstanceError
from decimal import Decimal
from typing import Any

import hypothesis.strategies as st
import pytest
from hypothesis import given

from pebble.pebble_ast import (
    Access,
    Assignment,
    Binary,
    Declaration,
    ExpressionStatement,
    Field,
    For,
    Function,
    Group,
    If,
    Literal,
    Method,
    Node,
    Return,
    Source,
    While,
)


def test_literal_to_dict() -> None:
    assert Literal(5).to_dict() == {"kind": "literal", "value": 5}
    assert Literal(None).to_dict() == {"kind": "literal", "value": None}


def test_access_without_receiver_to_dict() -> None:
    assert Access(None, "x").to_dict() == {
        "kind": "access",
        "receiver": None,
        "name": "x",
    }


def test_nested_to_dict() -> None:
    node = Binary("+", Literal(1), Access(None, "x"))
    d = node.to_dict()
    assert d["kind"] == "binary"
    assert d["operator"] == "+"
    assert d["left"] == {"kind": "literal", "value": 1}
    assert d["right"]["kind"] == "access"


def test_tuples_serialize_as_lists() -> None:
    node = Function(Access(None, "obj"), "call", (Literal(1), Literal("a")))
    d = node.to_dict()
    assert isinstance(d["arguments"], list)
    assert [a["value"] for a in d["arguments"]] == [1, "a"]
    assert d["receiver"]["name"] == "obj"


def test_method_parameters_stay_strings() -> None:
    d = Method("f", ("a", "b"), (Return(Literal(0)),)).to_dict()
    assert d["parameters"] == ["a", "b"]
    assert d["statements"][0]["kind"] == "return"


def test_field_has_type() -> None:
    assert Field("x", "Integer").has_type
    assert not Field("x").has_type
    assert not Field("x", None, Literal(1)).has_type


def test_field_to_dict_includes_has_type() -> None:
    assert Field("x", "String", Literal("s")).to_dict() == {
        "kind": "field",
        "name": "x",
        "type_name": "String",
        "value": {"kind": "literal", "value": "s"},
        "has_type": True,
    }
    assert Field("y").to_dict()["has_type"] is False


def test_source_to_dict() -> None:
    tree = Source((Field("x"),), (Method("main"),))
    d = tree.to_dict()
    assert d["kind"] == "source"
    assert [f["name"] for f in d["fields"]] == ["x"]
    assert d["methods"][0] == {
        "kind": "method",
        "name": "main",
        "parameters": [],
        "statements": [],
    }


@pytest.mark.parametrize(
    "node,kind",
    [
        (Literal(1), "literal"),
        (Group(Literal(1)), "group"),
        (Access(None, "x"), "access"),
        (Function(None, "f"), "function"),
        (Binary("*", Literal(1), Literal(2)), "binary"),
        (ExpressionStatement(Literal(1)), "expression"),
        (Assignment(Access(None, "x"), Literal(1)), "assignment"),
        (Declaration("x"), "declaration"),
        (If(Literal(True)), "if"),
        (For("i", Access(None, "xs")), "for"),
        (While(Literal(False)), "while"),
        (Return(Literal(None)), "return"),
        (Field("x"), "field"),
        (Method("m"), "method"),
        (Source(), "source"),
    ],
)  # type: ignore[misc]
def test_kind_tags(node: Node, kind: str) -> None:
    assert node.kind == kind
    assert node.to_dict()["kind"] == kind


def test_nodes_are_immutable() -> None:
    node = Declaration("x", Literal(1))
    with pytest.raises(FrozenInstanceError):
        node.name = "y"  # type: ignore[misc]


def test_structural_equality_and_hash() -> None:
    a = If(Access(None, "c"), (Return(Literal(1)),), ())
    b = If(Access(None, "c"), (Return(Literal(1)),), ())
    c = If(Access(None, "c"), (), (Return(Literal(1)),))
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_decimal_literal_json_dump() -> None:
    d = Literal(Decimal("1.50")).to_dict()
    assert d["value"] == Decimal("1.50")
    dumped = json.loads(json.dumps(d, default=str))
    assert dumped == {"kind": "literal", "value": "1.50"}


@given(
    st.one_of(
        st.none(),
        st.booleans(),
        st.integers(),
        st.text(max_size=20),
    )
)  # type: ignore[misc]
def test_literal_value_passes_through(value: Any) -> None:
    node = ExpressionStatement(Literal(value))
    assert node.to_dict() == {
        "kind": "expression",
        "expression": {"kind": "literal", "value": value},
    }
