"""
Pebble CLI Entrypoint.

This module provides the command-line interface for the Pebble front end.
It lexes and parses source code and prints the result as JSON.

Features:
    - Read source from `.pebble` files or inline strings.
    - Dump the token list (`--tokens`) or the AST (default).
    - Choose right- or left-associative folding of binary operators.
    - Output to console or file.
    - Report the first lex/parse error as `error: <Kind> at offset <n>` and exit 1.

Example usage:
    pebble program.pebble
    pebble -s "LET x = 1 - 2 - 3;" --assoc left -p
    pebble program.pebble --tokens -o tokens.json

Functions:
    run_pebble(source: str, is_string: bool = False, tokens: bool = False,
               associativity: str = "right", out: str | None = None,
               pretty: bool = False) -> None:
        Executes the pipeline (read → lex → parse → output).

    main() -> None:
        Parses CLI arguments, configures logging, and invokes `run_pebble`.
"""

import argparse
import json
import logging
import sys
from typing import Any

from pebble.pebble_errors import PebbleError
from pebble.pebble_lexer import Token, lex
from pebble.pebble_parser import ASSOCIATIVITIES, parse_source

logger = logging.getLogger(__name__)


def token_to_dict(tok: Token) -> dict[str, Any]:
    return {"kind": tok.kind.value, "literal": tok.literal, "offset": tok.offset}


def run_pebble(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    associativity: str = "right",
    out: str | None = None,
    pretty: bool = False,
) -> None:
    """
    Run the Pebble front end and write its JSON output.

    Args:
        source (str): Pebble source code or path to a `.pebble` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        tokens (bool): If True, outputs the token list instead of the AST.
        associativity (str): Binary operator folding, "right" or "left".
        out (str | None): Optional path to write the output. If None, prints to stdout.
        pretty (bool): If True, indents the JSON output.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.pebble'.
        LexError, ParseError: On invalid source.
    """
    if not is_string and not source.endswith(".pebble"):
        raise ValueError("Only .pebble files are supported.")
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    token_list = lex(source)

    # 3. Parsing
    if tokens:
        payload: Any = [token_to_dict(tok) for tok in token_list]
    else:
        payload = parse_source(token_list, associativity=associativity).to_dict()

    # Decimal literals are written as strings to keep their exact digits.
    text = json.dumps(payload, indent=2 if pretty else None, default=str)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("wrote %s", out)
    else:
        print(text)


def main() -> None:
    """
    Entry point for the Pebble CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print tokens instead of the AST.
        - `--assoc`: Binary operator folding, 'right' (default) or 'left'.
        - `-o`, `--out`: Write output to a file.
        - `-p`, `--pretty`: Indent the JSON output.
        - `--verbose`: Enable debug logging.

    Exits with status 1 after printing the error kind and offset if the source
    cannot be lexed or parsed.
    """
    parser = argparse.ArgumentParser(prog="pebble")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the AST"
    )
    parser.add_argument(
        "--assoc",
        choices=ASSOCIATIVITIES,
        default="right",
        help="Binary operator associativity (default: right)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Indent the JSON output"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        run_pebble(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            associativity=args.assoc,
            out=args.out,
            pretty=args.pretty,
        )
    except PebbleError as e:
        print(f"error: {e.kind.value} at offset {e.offset}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
