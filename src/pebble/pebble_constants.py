"""
Shared lexical constants for the Pebble language.

Contents:
    WHITESPACE: Characters skipped between tokens.
    IDENTIFIER_START / IDENTIFIER_PART: ASCII classes for identifiers.
    DIGITS / NONZERO_DIGITS: ASCII classes for number literals.
    TWO_CHAR_OPERATORS / ONE_CHAR_OPERATORS: Operator and punctuation forms.
    OPERATOR_START: Every character that can begin an operator.
    ESCAPES: Escape letter to decoded character.
    KEYWORDS: Reserved words, matched case-insensitively by the parser.
"""

import string

WHITESPACE = frozenset(" \t\r\n")

IDENTIFIER_START = frozenset(string.ascii_letters + "_")
IDENTIFIER_PART = frozenset(string.ascii_letters + string.digits + "_")

DIGITS = frozenset(string.digits)
NONZERO_DIGITS = frozenset("123456789")

# Two-character forms are tried first so `==` never splits into `=` `=`.
TWO_CHAR_OPERATORS = ("==", "!=", ">=", "<=", "&&", "||")
ONE_CHAR_OPERATORS = (
    "=", ">", "<", "+", "-", "*", "/", "!", "(", ")", ";", ":", ",", "."
)  # fmt: skip

OPERATOR_START = frozenset(op[0] for op in TWO_CHAR_OPERATORS + ONE_CHAR_OPERATORS)

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

KEYWORDS = frozenset(
    {
        "LET",
        "DEF",
        "NIL",
        "TRUE",
        "FALSE",
        "IF",
        "DO",
        "ELSE",
        "END",
        "FOR",
        "IN",
        "WHILE",
        "RETURN",
    }
)

BINARY_OPERATORS: dict[str, tuple[str, ...]] = {
    "logical": ("&&", "||"),
    "equality": ("==", "!=", ">=", ">", "<=", "<"),
    "additive": ("+", "-"),
    "multiplicative": ("*", "/"),
}
