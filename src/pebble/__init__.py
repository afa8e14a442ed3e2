"""Pebble language front end: lexer, parser, and AST."""
