"""
Lexical analyzer for the Pebble programming language.

This module provides core components for converting raw source code into token lists:

Classes:
    CharacterStream: Cursor over the source text with bounded lookahead.
    TokenKind: The six token categories.
    Token: Represents a single token with kind, literal text, and source offset.
    Lexer: Converts a CharacterStream into a list of tokens.

Features:
    - Skips whitespace (space, tab, carriage return, newline)
    - Recognizes:
        * Identifiers (keywords are left to the parser)
        * Integers and decimals, with an optional leading minus sign
        * Character and string literals with escape sequences
        * Operators and punctuation, longest match first

Literal text is kept exactly as written: quotes and escape sequences stay in
the token and are decoded later, when the parser builds AST literals.

Raises:
    LexError: On the first character sequence that cannot start or complete a token.

Example:
    >>> lex("x = 42;")
    [Token(IDENTIFIER, 'x', 0), Token(OPERATOR, '=', 2), Token(INTEGER, '42', 4), Token(OPERATOR, ';', 6)]

Exports:
    - CharacterStream
    - Token
    - TokenKind
    - Lexer
    - lex
"""

import logging
from dataclasses import dataclass
from enum import Enum

from pebble.pebble_constants import (
    DIGITS,
    ESCAPES,
    IDENTIFIER_PART,
    IDENTIFIER_START,
    NONZERO_DIGITS,
    ONE_CHAR_OPERATORS,
    OPERATOR_START,
    TWO_CHAR_OPERATORS,
    WHITESPACE,
)
from pebble.pebble_errors import LexError, LexErrorKind

logger = logging.getLogger(__name__)


class CharacterStream:
    """
    A cursor over a source string used by the Pebble lexer.

    The source never changes; only `position` moves, and only forward through
    `advance()`.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
    """

    def __init__(self, source: str, position: int = 0):
        self.source = source
        self.position = position

    def has(self, offset: int = 0) -> bool:
        """Reports whether a character exists at `position + offset`."""
        index = self.position + offset
        return 0 <= index < len(self.source)

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Args:
            offset (int, optional): Number of characters to look ahead. Defaults to 0.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        if not self.has(offset):
            return ""
        return self.source[self.position + offset]

    def advance(self) -> None:
        """Moves the cursor forward by one character."""
        self.position += 1


class TokenKind(Enum):
    IDENTIFIER = "IDENTIFIER"
    INTEGER = "INTEGER"
    DECIMAL = "DECIMAL"
    CHARACTER = "CHARACTER"
    STRING = "STRING"
    OPERATOR = "OPERATOR"


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token in the Pebble language.

    Attributes:
        kind (TokenKind): The token category.
        literal (str): The exact source text of the token.
        offset (int): Index of the token's first character in the source.
    """

    kind: TokenKind
    literal: str
    offset: int

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.literal!r}, {self.offset})"


class Lexer:
    """Lexical analyzer for the Pebble language.

    The Lexer takes a CharacterStream and converts it into a list of Token objects.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> None:
        self.stream.advance()

    def emit(self, kind: TokenKind, start: int) -> Token:
        """Builds a token from `start` up to the current position."""
        return Token(kind, self.stream.source[start : self.stream.position], start)

    def lex(self) -> list[Token]:
        """Tokenizes the whole stream, skipping whitespace between tokens.

        Returns:
            list[Token]: Tokens in source order.

        Raises:
            LexError: If any part of the input is not a valid token.
        """
        tokens: list[Token] = []
        while self.stream.has():
            if self.peek() in WHITESPACE:
                self.advance()
            else:
                tokens.append(self.lex_token())
        logger.debug(
            "lexed %d tokens from %d characters", len(tokens), len(self.stream.source)
        )
        return tokens

    def lex_token(self) -> Token:
        """Dispatches on lookahead to the rule for the next token.

        Returns:
            Token: The token starting at the current position.

        Raises:
            LexError: If the current character cannot start any token.
        """
        ch = self.peek()

        # 1. Identifier
        if ch in IDENTIFIER_START:
            return self.lex_identifier()

        # 2. Number, possibly negative
        if ch in DIGITS or (ch == "-" and self.peek(1) in DIGITS):
            return self.lex_number()

        # 3. Character
        if ch == "'":
            return self.lex_character()

        # 4. String
        if ch == '"':
            return self.lex_string()

        # 5. Operator or punctuation
        if ch in OPERATOR_START:
            return self.lex_operator()

        raise LexError(
            LexErrorKind.UNRECOGNIZED_CHARACTER,
            self.stream.position,
            f"unexpected character {ch!r}",
        )

    def lex_identifier(self) -> Token:
        start = self.stream.position
        self.advance()
        while self.peek() in IDENTIFIER_PART:
            self.advance()
        return self.emit(TokenKind.IDENTIFIER, start)

    def lex_number(self) -> Token:
        """Lexes an integer or decimal literal.

        Raises:
            LexError: MalformedNumber for a missing integer part, a leading zero
                followed by digits, or a `.` without trailing digits.
        """
        start = self.stream.position
        if self.peek() == "-":
            self.advance()

        if self.peek() == "0":
            self.advance()
            if self.peek() in DIGITS:
                raise LexError(
                    LexErrorKind.MALFORMED_NUMBER, start, "leading zero before digits"
                )
        elif self.peek() in NONZERO_DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()
        else:
            raise LexError(LexErrorKind.MALFORMED_NUMBER, start, "missing integer part")

        if self.peek() != ".":
            return self.emit(TokenKind.INTEGER, start)

        self.advance()
        if self.peek() not in DIGITS:
            raise LexError(
                LexErrorKind.MALFORMED_NUMBER, start, "expected digits after '.'"
            )
        while self.peek() in DIGITS:
            self.advance()
        return self.emit(TokenKind.DECIMAL, start)

    def lex_character(self) -> Token:
        """Lexes a character literal holding exactly one character or escape."""
        start = self.stream.position
        self.advance()  # opening quote

        if not self.stream.has():
            raise LexError(LexErrorKind.UNTERMINATED_CHARACTER, start)
        if self.peek() == "'":
            raise LexError(
                LexErrorKind.INVALID_CHARACTER_LITERAL, start, "empty character literal"
            )

        if self.peek() == "\\":
            self.lex_escape(start, LexErrorKind.UNTERMINATED_CHARACTER)
        else:
            self.advance()

        if not self.stream.has():
            raise LexError(LexErrorKind.UNTERMINATED_CHARACTER, start)
        if self.peek() != "'":
            raise LexError(
                LexErrorKind.INVALID_CHARACTER_LITERAL,
                start,
                "character literal must contain exactly one character",
            )
        self.advance()  # closing quote
        return self.emit(TokenKind.CHARACTER, start)

    def lex_string(self) -> Token:
        """Lexes a string literal up to the closing double quote."""
        start = self.stream.position
        self.advance()  # opening quote

        while True:
            if not self.stream.has():
                raise LexError(LexErrorKind.UNTERMINATED_STRING, start)
            ch = self.peek()
            if ch == '"':
                self.advance()
                return self.emit(TokenKind.STRING, start)
            if ch == "\\":
                self.lex_escape(start, LexErrorKind.UNTERMINATED_STRING)
            else:
                self.advance()

    def lex_escape(self, start: int, unterminated: LexErrorKind) -> None:
        """Consumes a backslash and its escape letter.

        Args:
            start: Offset of the enclosing literal's opening quote.
            unterminated: Error kind to raise if the input ends right after the
                backslash.

        Raises:
            LexError: InvalidEscape at the backslash for an unknown escape letter.
        """
        backslash = self.stream.position
        if not self.stream.has(1):
            raise LexError(unterminated, start)
        if self.peek(1) not in ESCAPES:
            raise LexError(
                LexErrorKind.INVALID_ESCAPE,
                backslash,
                f"unknown escape sequence \\{self.peek(1)}",
            )
        self.advance()
        self.advance()

    def lex_operator(self) -> Token:
        """Matches the longest operator at the current position."""
        start = self.stream.position
        if self.peek() + self.peek(1) in TWO_CHAR_OPERATORS:
            self.advance()
            self.advance()
            return self.emit(TokenKind.OPERATOR, start)
        if self.peek() in ONE_CHAR_OPERATORS:
            self.advance()
            return self.emit(TokenKind.OPERATOR, start)
        raise LexError(
            LexErrorKind.UNKNOWN_OPERATOR, start, f"unknown operator {self.peek()!r}"
        )


def lex(source: str) -> list[Token]:
    """Tokenizes a complete source text.

    Args:
        source: The Pebble source code.

    Returns:
        The tokens of `source`, in order, without whitespace.

    Raises:
        LexError: On the first invalid token.
    """
    return Lexer(CharacterStream(source)).lex()


__all__ = ["CharacterStream", "Lexer", "Token", "TokenKind", "lex"]
