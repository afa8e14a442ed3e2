"""
Error types raised by the Pebble lexer and parser.

Both stages fail fast: the first problem aborts the call and surfaces to the
caller as a single exception carrying an error kind and the source offset of
the offending character or token.

Classes:
    LexErrorKind: Failure categories of the lexer.
    ParseErrorKind: Failure categories of the parser.
    PebbleError: Common base carrying `kind` and `offset`.
    LexError: Raised by the lexer.
    ParseError: Raised by the parser.

Example:
    >>> try:
    ...     lex("007")
    ... except LexError as e:
    ...     print(e.kind.value, e.offset)
    MalformedNumber 0
"""

from enum import Enum


class LexErrorKind(Enum):
    """Reasons the lexer can reject its input."""

    UNRECOGNIZED_CHARACTER = "UnrecognizedCharacter"
    MALFORMED_NUMBER = "MalformedNumber"
    UNTERMINATED_CHARACTER = "UnterminatedCharacter"
    INVALID_CHARACTER_LITERAL = "InvalidCharacterLiteral"
    UNTERMINATED_STRING = "UnterminatedString"
    INVALID_ESCAPE = "InvalidEscape"
    UNKNOWN_OPERATOR = "UnknownOperator"


class ParseErrorKind(Enum):
    """Reasons the parser can reject a token sequence."""

    UNEXPECTED_TOKEN = "UnexpectedToken"
    MISSING_SEMICOLON = "MissingSemicolon"
    EXPECTED_EXPRESSION = "ExpectedExpression"
    UNCLOSED_ARGUMENTS = "UnclosedArguments"
    EXPECTED_IDENTIFIER = "ExpectedIdentifier"
    UNCLOSED_GROUP = "UnclosedGroup"
    EXPECTED_PARAMETERS = "ExpectedParameters"
    UNCLOSED_PARAMETERS = "UnclosedParameters"
    MISSING_KEYWORD = "MissingKeyword"
    NESTING_TOO_DEEP = "NestingTooDeep"


class PebbleError(Exception):
    """Base class for front-end failures.

    Attributes:
        kind (LexErrorKind | ParseErrorKind): The failure category.
        offset (int): Index into the source text where the failure was detected.
        detail (str | None): Optional human-readable context.
    """

    def __init__(
        self,
        kind: LexErrorKind | ParseErrorKind,
        offset: int,
        detail: str | None = None,
    ):
        message = f"{kind.value} at offset {offset}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.kind = kind
        self.offset = offset
        self.detail = detail


class LexError(PebbleError):
    """Raised when the source text cannot be split into tokens."""

    def __init__(self, kind: LexErrorKind, offset: int, detail: str | None = None):
        super().__init__(kind, offset, detail)


class ParseError(PebbleError):
    """Raised when the token sequence does not match the grammar."""

    def __init__(self, kind: ParseErrorKind, offset: int, detail: str | None = None):
        super().__init__(kind, offset, detail)
