import pytest

from pebble.pebble_errors import (
    LexError,
    LexErrorKind,
    ParseError,
    ParseErrorKind,
    PebbleError,
)


def test_message_without_detail() -> None:
    err = LexError(LexErrorKind.MALFORMED_NUMBER, 3)
    assert str(err) == "MalformedNumber at offset 3"
    assert err.detail is None


def test_message_with_detail() -> None:
    err = ParseError(ParseErrorKind.MISSING_SEMICOLON, 8, "expected ';'")
    assert str(err) == "MissingSemicolon at offset 8: expected ';'"
    assert err.kind is ParseErrorKind.MISSING_SEMICOLON
    assert err.offset == 8


@pytest.mark.parametrize(
    "err",
    [
        LexError(LexErrorKind.INVALID_ESCAPE, 0),
        ParseError(ParseErrorKind.UNCLOSED_GROUP, 1),
    ],
)  # type: ignore[misc]
def test_errors_share_base(err: PebbleError) -> None:
    assert isinstance(err, PebbleError)
    assert isinstance(err, Exception)


def test_kind_values_are_camel_case_names() -> None:
    for kind in [*LexErrorKind, *ParseErrorKind]:
        assert kind.value == "".join(p.capitalize() for p in kind.name.split("_"))
