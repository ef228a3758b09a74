"""ANTLR4 reserved words that are never treated as rule names or references.

The set mixes true grammar keywords (``fragment``, ``returns``, ...) with
lexer-command words (``skip``, ``pushMode``, ...) and the built-in
``EOF`` token, because all of them can appear as bare identifiers in a
rule body without naming another rule.
"""
from __future__ import annotations

from typing import Final

ANTLR_KEYWORDS: Final[frozenset[str]] = frozenset({
    # Declarations
    "fragment",
    "grammar",
    "lexer",
    "parser",
    "options",
    "tokens",
    "channels",
    "import",
    "mode",
    # Rule signatures and exception handlers
    "returns",
    "locals",
    "throws",
    "catch",
    "finally",
    # Literal words used inside options and actions
    "true",
    "false",
    "null",
    # Lexer commands
    "skip",
    "channel",
    "type",
    "more",
    "popMode",
    "pushMode",
    # Built-in tokens
    "EOF",
})


def is_keyword(name: str) -> bool:
    """Return True if ``name`` is a reserved ANTLR word (case-sensitive)."""
    return name in ANTLR_KEYWORDS
