"""
Defines the abstract syntax tree (AST) node structure for the Pebble programming language.

Every construct the parser recognizes maps to exactly one immutable node class.
Nodes are frozen dataclasses; child sequences are tuples, so a tree never changes
after the parser has built it.

Top level:
    Source: Field declarations followed by method declarations.
    Field: `LET name (: Type)? (= value)? ;`
    Method: `DEF name(params) DO statements END`

Statements:
    ExpressionStatement, Assignment, Declaration, If, For, While, Return

Expressions:
    Literal, Group, Access, Function, Binary

Each node tracks:
    kind (str): A short tag naming the construct (e.g. "binary", "if").
    to_dict(): Nested plain-dict form with a "kind" key plus one key per field,
        suitable for JSON output or structural assertions in tests.

Example:
    Binary("+", Literal(1), Access(None, "x")).to_dict()
    # {'kind': 'binary', 'operator': '+', 'left': {...}, 'right': {...}}
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, ClassVar, Union

ASTDict = dict[str, Any]
"""Serialized form of a node: {"kind": ..., <field>: <value>, ...}."""

LiteralValue = Union[None, bool, int, Decimal, str]


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    return value


class Node:
    """Shared serialization for every AST node class."""

    kind: ClassVar[str] = "node"

    def to_dict(self) -> ASTDict:
        result: ASTDict = {"kind": self.kind}
        for f in fields(self):  # type: ignore[arg-type]
            result[f.name] = _serialize(getattr(self, f.name))
        return result


# Expressions


@dataclass(frozen=True)
class Literal(Node):
    """A constant value.

    `value` is None for NIL, a bool, an int, a Decimal, a one-character str for
    character literals, or a str for string literals. Escapes are already decoded.
    """

    kind: ClassVar[str] = "literal"

    value: LiteralValue


@dataclass(frozen=True)
class Group(Node):
    """An explicitly parenthesized expression."""

    kind: ClassVar[str] = "group"

    expression: Expression


@dataclass(frozen=True)
class Access(Node):
    """A variable (`receiver` is None) or a field of `receiver`."""

    kind: ClassVar[str] = "access"

    receiver: Expression | None
    name: str


@dataclass(frozen=True)
class Function(Node):
    """A function call (`receiver` is None) or a method call on `receiver`."""

    kind: ClassVar[str] = "function"

    receiver: Expression | None
    name: str
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Binary(Node):
    kind: ClassVar[str] = "binary"

    operator: str
    left: Expression
    right: Expression


Expression = Union[Literal, Group, Access, Function, Binary]


# Statements


@dataclass(frozen=True)
class ExpressionStatement(Node):
    kind: ClassVar[str] = "expression"

    expression: Expression


@dataclass(frozen=True)
class Assignment(Node):
    kind: ClassVar[str] = "assignment"

    receiver: Expression
    value: Expression


@dataclass(frozen=True)
class Declaration(Node):
    """`LET name (= value)? ;` inside a method body."""

    kind: ClassVar[str] = "declaration"

    name: str
    value: Expression | None = None


@dataclass(frozen=True)
class If(Node):
    kind: ClassVar[str] = "if"

    condition: Expression
    then_statements: tuple[Statement, ...] = ()
    else_statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class For(Node):
    """`FOR name IN value DO statements END`"""

    kind: ClassVar[str] = "for"

    name: str
    value: Expression
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class While(Node):
    kind: ClassVar[str] = "while"

    condition: Expression
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Return(Node):
    kind: ClassVar[str] = "return"

    value: Expression


Statement = Union[
    ExpressionStatement, Assignment, Declaration, If, For, While, Return
]


# Declarations


@dataclass(frozen=True)
class Field(Node):
    """A top-level `LET` declaration.

    Attributes:
        name (str): The field name.
        type_name (str | None): The annotated type name, if one was written.
        value (Expression | None): The initializer, if one was written.
    """

    kind: ClassVar[str] = "field"

    name: str
    type_name: str | None = None
    value: Expression | None = None

    @property
    def has_type(self) -> bool:
        return self.type_name is not None

    def to_dict(self) -> ASTDict:
        result = super().to_dict()
        result["has_type"] = self.has_type
        return result


@dataclass(frozen=True)
class Method(Node):
    kind: ClassVar[str] = "method"

    name: str
    parameters: tuple[str, ...] = ()
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Source(Node):
    """Root of a parsed program."""

    kind: ClassVar[str] = "source"

    fields: tuple[Field, ...] = ()
    methods: tuple[Method, ...] = ()


__all__ = [
    "ASTDict",
    "Access",
    "Assignment",
    "Binary",
    "Declaration",
    "Expression",
    "ExpressionStatement",
    "Field",
    "For",
    "Function",
    "Group",
    "If",
    "Literal",
    "LiteralValue",
    "Method",
    "Node",
    "Return",
    "Source",
    "Statement",
    "While",
]
