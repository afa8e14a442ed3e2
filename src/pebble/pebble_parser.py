"""
Pebble Language Parser

Parses Pebble language tokens into a `Source` abstract syntax tree.

This module implements a recursive-descent parser: every grammar rule has its own
`parse_*` method, and references to other rules are calls to those methods. Nodes
are built bottom-up and never revisited.

Supported Constructs
--------------------
- Top level:
    * Fields: `LET name (: Type)? (= expr)? ;`
    * Methods: `DEF name(a, b) DO ... END`

- Statements:
    * Declarations: `LET x = 1;`
    * Assignments and expression statements: `x = y + 1;`, `print(x);`
    * Control flow: `IF ... DO ... ELSE ... END`, `FOR x IN xs DO ... END`,
      `WHILE ... DO ... END`, `RETURN expr;`

- Expressions, lowest to highest precedence:
    * logical `&& ||`
    * equality `== != >= > <= <`
    * additive `+ -`
    * multiplicative `* /`
    * secondary: member access `a.b` and method calls `a.b(c)`
    * primary: literals, `NIL`, `TRUE`, `FALSE`, names, calls, `( expr )`

Parser Behavior
---------------
- Fails fast: the first mismatch raises `ParseError` with the offending offset.
- Keywords are identifiers compared case-insensitively against `KEYWORDS`.
- Repeated operators of one precedence level fold to the right by default;
  `associativity="left"` selects the conventional left fold. Both folds build
  the tree from a flat list of operands, so long chains cost no extra stack.
- Expressions and blocks nest at most `MAX_NESTING` deep; deeper input raises
  `ParseError` with kind NestingTooDeep.

Entry Points
------------
- `parse_source()`: Parse a full program into a `Source`.
- `parse_statement()`: Parse a single statement.
- `parse_expression()`: Parse a single expression.

Raises
------
ParseError
    Raised when the token sequence does not match the grammar.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal

from pebble.pebble_ast import (
    Access,
    Assignment,
    Binary,
    Declaration,
    Expression,
    ExpressionStatement,
    Field,
    For,
    Function,
    Group,
    If,
    Literal,
    Method,
    Return,
    Source,
    Statement,
    While,
)
from pebble.pebble_constants import BINARY_OPERATORS, ESCAPES, KEYWORDS
from pebble.pebble_errors import ParseError, ParseErrorKind
from pebble.pebble_lexer import Token, TokenKind

logger = logging.getLogger(__name__)

ASSOCIATIVITIES = ("right", "left")

# Deeper input raises NestingTooDeep before the interpreter stack runs out.
MAX_NESTING = 64

Pattern = TokenKind | str


def unescape(body: str) -> str:
    """Decodes escape sequences in the body of a character or string literal.

    Args:
        body: Literal text without its surrounding quotes.

    Returns:
        The text with every `\\x` escape replaced by the character it denotes.
    """
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            out.append(ESCAPES.get(body[i + 1], body[i + 1]))
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


class TokenStream:
    """Cursor over the token list, mirroring `CharacterStream`.

    Attributes:
        tokens (list[Token]): The tokens being parsed.
        position (int): Index of the next unconsumed token.
    """

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.position = 0

    def has(self, offset: int = 0) -> bool:
        index = self.position + offset
        return 0 <= index < len(self.tokens)

    def peek(self, offset: int = 0) -> Token | None:
        """Returns the token at `position + offset`, or None when out of range."""
        if not self.has(offset):
            return None
        return self.tokens[self.position + offset]

    def advance(self) -> None:
        self.position += 1


class Parser:
    """
    Pebble Parser Class

    Transforms a list of lexical tokens into a `Source` tree.

    Attributes
    ----------
    tokens : TokenStream
        Cursor over the input tokens.
    associativity : str
        "right" (default) nests repeated same-precedence operators into the
        right operand; "left" accumulates them into the left operand.
    depth : int
        Current count of open expressions and blocks, capped at `MAX_NESTING`.

    Raises
    ------
    ValueError
        If `associativity` is not one of `ASSOCIATIVITIES`.
    ParseError
        From any `parse_*` method when the grammar is violated.
    """

    def __init__(self, tokens: list[Token], associativity: str = "right") -> None:
        if associativity not in ASSOCIATIVITIES:
            raise ValueError(f"Unknown associativity: {associativity!r}")
        self.tokens = TokenStream(tokens)
        self.associativity = associativity
        self.depth = 0

    # Token helpers

    def current(self) -> Token | None:
        return self.tokens.peek()

    def is_keyword(self, tok: Token | None) -> bool:
        return (
            tok is not None
            and tok.kind is TokenKind.IDENTIFIER
            and tok.literal.upper() in KEYWORDS
        )

    def check(self, *patterns: Pattern) -> bool:
        """Reports whether the current token matches any of `patterns`.

        A `TokenKind` pattern matches on kind. A keyword pattern matches an
        identifier with that spelling in any case. Any other string matches an
        operator with exactly that literal.
        """
        tok = self.current()
        if tok is None:
            return False
        for pattern in patterns:
            if isinstance(pattern, TokenKind):
                if tok.kind is pattern:
                    return True
            elif pattern in KEYWORDS:
                if self.is_keyword(tok) and tok.literal.upper() == pattern:
                    return True
            elif tok.kind is TokenKind.OPERATOR and tok.literal == pattern:
                return True
        return False

    def match(self, *patterns: Pattern) -> Token | None:
        """Consumes and returns the current token if it matches any of `patterns`."""
        if not self.check(*patterns):
            return None
        tok = self.current()
        self.tokens.advance()
        return tok

    def error_offset(self) -> int:
        """Offset of the current token, or just past the last token at end of input."""
        tok = self.current()
        if tok is not None:
            return tok.offset
        if not self.tokens.tokens:
            return 0
        last = self.tokens.tokens[-1]
        return last.offset + len(last.literal)

    def expect(self, pattern: Pattern, kind: ParseErrorKind) -> Token:
        tok = self.match(pattern)
        if tok is None:
            raise ParseError(kind, self.error_offset(), f"expected {pattern!r}")
        return tok

    def expect_identifier(self) -> str:
        """Consumes a non-keyword identifier and returns its text."""
        tok = self.current()
        if tok is None or tok.kind is not TokenKind.IDENTIFIER or self.is_keyword(tok):
            raise ParseError(
                ParseErrorKind.EXPECTED_IDENTIFIER,
                self.error_offset(),
                "expected an identifier",
            )
        self.tokens.advance()
        return tok.literal

    def enter(self) -> None:
        """Opens one level of nesting, failing once `MAX_NESTING` are open."""
        if self.depth >= MAX_NESTING:
            raise ParseError(
                ParseErrorKind.NESTING_TOO_DEEP,
                self.error_offset(),
                f"more than {MAX_NESTING} nested expressions or blocks",
            )
        self.depth += 1

    def expect_semicolon(self) -> None:
        if self.match(";") is None:
            last = self.tokens.peek(-1)
            raise ParseError(
                ParseErrorKind.MISSING_SEMICOLON,
                last.offset if last is not None else self.error_offset(),
                "expected ';'",
            )

    # Top level

    def parse_source(self) -> Source:
        """Parse a full Pebble program: any mix of fields and methods."""
        fields: list[Field] = []
        methods: list[Method] = []
        tok = self.current()
        while tok is not None:
            if self.match("LET"):
                fields.append(self.parse_field())
            elif self.match("DEF"):
                methods.append(self.parse_method())
            else:
                raise ParseError(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    tok.offset,
                    f"expected LET or DEF, got {tok.literal!r}",
                )
            tok = self.current()
        logger.debug("parsed %d fields and %d methods", len(fields), len(methods))
        return Source(tuple(fields), tuple(methods))

    def parse_field(self) -> Field:
        """Parse a field after its `LET`: name, optional type, optional value."""
        name = self.expect_identifier()

        type_name: str | None = None
        if self.match(":"):
            type_name = self.expect_identifier()

        value: Expression | None = None
        if self.match("="):
            value = self.parse_expression()

        self.expect_semicolon()
        return Field(name, type_name, value)

    def parse_method(self) -> Method:
        """Parse a method after its `DEF`: name, parameter list, and body."""
        name = self.expect_identifier()
        self.expect("(", ParseErrorKind.EXPECTED_PARAMETERS)

        parameters: list[str] = []
        if not self.match(")"):
            parameters.append(self.expect_identifier())
            while self.match(","):
                parameters.append(self.expect_identifier())
            self.expect(")", ParseErrorKind.UNCLOSED_PARAMETERS)

        self.expect("DO", ParseErrorKind.MISSING_KEYWORD)
        statements = self.parse_block("END")
        self.expect("END", ParseErrorKind.MISSING_KEYWORD)
        return Method(name, tuple(parameters), statements)

    def parse_block(self, *terminators: str) -> tuple[Statement, ...]:
        """Parse statements until one of `terminators` is next (not consumed)."""
        statements: list[Statement] = []
        self.enter()
        try:
            while not self.check(*terminators):
                if not self.tokens.has():
                    raise ParseError(
                        ParseErrorKind.MISSING_KEYWORD,
                        self.error_offset(),
                        f"expected {' or '.join(terminators)}",
                    )
                statements.append(self.parse_statement())
        finally:
            self.depth -= 1
        return tuple(statements)

    # Statements

    def parse_statement(self) -> Statement:
        """Parse a single statement, dispatching on its leading keyword."""
        if self.match("LET"):
            return self.parse_declaration_statement()
        if self.match("IF"):
            return self.parse_if_statement()
        if self.match("FOR"):
            return self.parse_for_statement()
        if self.match("WHILE"):
            return self.parse_while_statement()
        if self.match("RETURN"):
            return self.parse_return_statement()

        receiver = self.parse_expression()
        if self.match("="):
            value = self.parse_expression()
            self.expect_semicolon()
            return Assignment(receiver, value)
        self.expect_semicolon()
        return ExpressionStatement(receiver)

    def parse_declaration_statement(self) -> Declaration:
        name = self.expect_identifier()
        value: Expression | None = None
        if self.match("="):
            value = self.parse_expression()
        self.expect_semicolon()
        return Declaration(name, value)

    def parse_if_statement(self) -> If:
        condition = self.parse_expression()
        self.expect("DO", ParseErrorKind.MISSING_KEYWORD)
        then_statements = self.parse_block("ELSE", "END")
        else_statements: tuple[Statement, ...] = ()
        if self.match("ELSE"):
            else_statements = self.parse_block("END")
        self.expect("END", ParseErrorKind.MISSING_KEYWORD)
        return If(condition, then_statements, else_statements)

    def parse_for_statement(self) -> For:
        name = self.expect_identifier()
        self.expect("IN", ParseErrorKind.MISSING_KEYWORD)
        value = self.parse_expression()
        self.expect("DO", ParseErrorKind.MISSING_KEYWORD)
        statements = self.parse_block("END")
        self.expect("END", ParseErrorKind.MISSING_KEYWORD)
        return For(name, value, statements)

    def parse_while_statement(self) -> While:
        condition = self.parse_expression()
        self.expect("DO", ParseErrorKind.MISSING_KEYWORD)
        statements = self.parse_block("END")
        self.expect("END", ParseErrorKind.MISSING_KEYWORD)
        return While(condition, statements)

    def parse_return_statement(self) -> Return:
        value = self.parse_expression()
        self.expect_semicolon()
        return Return(value)

    # Expressions

    def parse_expression(self) -> Expression:
        self.enter()
        try:
            return self.parse_logical_expression()
        finally:
            self.depth -= 1

    def parse_logical_expression(self) -> Expression:
        return self.parse_binary(
            BINARY_OPERATORS["logical"], self.parse_equality_expression
        )

    def parse_equality_expression(self) -> Expression:
        return self.parse_binary(
            BINARY_OPERATORS["equality"], self.parse_additive_expression
        )

    def parse_additive_expression(self) -> Expression:
        return self.parse_binary(
            BINARY_OPERATORS["additive"], self.parse_multiplicative_expression
        )

    def parse_multiplicative_expression(self) -> Expression:
        return self.parse_binary(
            BINARY_OPERATORS["multiplicative"], self.parse_secondary_expression
        )

    def parse_binary(
        self, operators: tuple[str, ...], operand: Callable[[], Expression]
    ) -> Expression:
        """Parse `operand (op operand)*` for one precedence level.

        Right fold: `a - b - c` is `a - (b - c)`.
        Left fold: `a - b - c` is `(a - b) - c`.
        """
        operands = [operand()]
        literals: list[str] = []
        op = self.match(*operators)
        while op is not None:
            literals.append(op.literal)
            operands.append(operand())
            op = self.match(*operators)

        if self.associativity == "left":
            expr = operands[0]
            for literal, right in zip(literals, operands[1:]):
                expr = Binary(literal, expr, right)
            return expr

        expr = operands[-1]
        for literal, left in zip(reversed(literals), reversed(operands[:-1])):
            expr = Binary(literal, left, expr)
        return expr

    def parse_secondary_expression(self) -> Expression:
        """Parse a primary followed by any chain of `.name` or `.name(args)`."""
        expr = self.parse_primary_expression()
        while self.match("."):
            name = self.expect_identifier()
            if self.match("("):
                expr = Function(expr, name, self.parse_arguments())
            else:
                expr = Access(expr, name)
        return expr

    def parse_primary_expression(self) -> Expression:
        """Parse a literal, name, call, or parenthesized group."""
        if self.match("NIL"):
            return Literal(None)
        if self.match("TRUE"):
            return Literal(True)
        if self.match("FALSE"):
            return Literal(False)

        tok = self.match(TokenKind.INTEGER)
        if tok is not None:
            return Literal(int(tok.literal))

        tok = self.match(TokenKind.DECIMAL)
        if tok is not None:
            return Literal(Decimal(tok.literal))

        tok = self.match(TokenKind.CHARACTER, TokenKind.STRING)
        if tok is not None:
            return Literal(unescape(tok.literal[1:-1]))

        tok = self.current()
        if (
            tok is not None
            and tok.kind is TokenKind.IDENTIFIER
            and not self.is_keyword(tok)
        ):
            self.tokens.advance()
            if self.match("("):
                return Function(None, tok.literal, self.parse_arguments())
            return Access(None, tok.literal)

        if self.match("("):
            expr = self.parse_expression()
            self.expect(")", ParseErrorKind.UNCLOSED_GROUP)
            return Group(expr)

        raise ParseError(
            ParseErrorKind.EXPECTED_EXPRESSION,
            self.error_offset(),
            "expected an expression",
        )

    def parse_arguments(self) -> tuple[Expression, ...]:
        """Parse a call's arguments after its `(`, through the closing `)`."""
        if self.match(")"):
            return ()
        arguments = [self.parse_expression()]
        while self.match(","):
            arguments.append(self.parse_expression())
        if self.match(")") is None:
            raise ParseError(
                ParseErrorKind.UNCLOSED_ARGUMENTS,
                self.error_offset(),
                "expected ')' to close the argument list",
            )
        return tuple(arguments)


def parse_source(tokens: list[Token], associativity: str = "right") -> Source:
    """Parse a token list into a `Source` tree.

    Args:
        tokens: Output of `pebble.pebble_lexer.lex`.
        associativity: "right" (default) or "left"; see `Parser`.

    Returns:
        The root of the AST.

    Raises:
        ParseError: On the first grammar violation.
        ValueError: If `associativity` is unknown.
    """
    return Parser(tokens, associativity=associativity).parse_source()


__all__ = [
    "ASSOCIATIVITIES",
    "MAX_NESTING",
    "Parser",
    "TokenStream",
    "parse_source",
    "unescape",
]
