"""Comment and header stripping for ANTLR4 grammar source.

The stripped buffer is only used to *find* rule definitions.  All
positions reported to callers are recomputed against the original text,
so the stripper is free to shift offsets around.

Removed constructs:
    - ``// ...`` line comments and ``/* ... */`` block comments
    - ``grammar X;``, ``lexer grammar X;`` and ``parser grammar X;``
    - ``options {...}``, ``tokens {...}`` and ``channels {...}`` blocks
    - named action blocks such as ``@header {...}`` or ``@parser::members {...}``
    - ``import X, Y;`` statements
    - top-level ``mode NAME;`` declarations (the rules that follow stay)

An unterminated ``/*`` swallows everything up to the end of the input.
"""
from __future__ import annotations

import re
from typing import Final

from g4lens.grammar.scanner import skip_braces

_LINE_COMMENT: Final[re.Pattern[str]] = re.compile(r"//[^\n]*")
_BLOCK_COMMENT: Final[re.Pattern[str]] = re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)
_GRAMMAR_DECL: Final[re.Pattern[str]] = re.compile(
    r"(?:grammar|lexer\s+grammar|parser\s+grammar)\s+[a-zA-Z_][a-zA-Z0-9_]*\s*;"
)
_IMPORT: Final[re.Pattern[str]] = re.compile(r"import\s+[^;]+;")
_MODE_DECL: Final[re.Pattern[str]] = re.compile(
    r"^mode\s+[a-zA-Z_][a-zA-Z0-9_]*\s*;", re.MULTILINE
)

# Block openers: the match ends on the ``{`` that starts the block.
_OPTIONS_BLOCK: Final[re.Pattern[str]] = re.compile(r"options\s*\{")
_TOKENS_BLOCK: Final[re.Pattern[str]] = re.compile(r"tokens\s*\{")
_CHANNELS_BLOCK: Final[re.Pattern[str]] = re.compile(r"channels\s*\{")
_NAMED_ACTION: Final[re.Pattern[str]] = re.compile(
    r"@[a-zA-Z_][a-zA-Z0-9_]*(?:::[a-zA-Z_][a-zA-Z0-9_]*)?\s*\{"
)


def strip_comments(source: str) -> str:
    """Remove line and block comments."""
    without_lines = _LINE_COMMENT.sub("", source)
    return _BLOCK_COMMENT.sub("", without_lines)


def remove_blocks(text: str, opener: re.Pattern[str]) -> str:
    """Remove every block introduced by ``opener`` together with its body.

    ``opener`` must match up to and including the opening ``{``.  The end
    of the block is found by counting nested braces.
    """
    result = text
    match = opener.search(result)
    while match is not None:
        end = skip_braces(result, match.end() - 1)
        result = result[:match.start()] + result[end:]
        match = opener.search(result, match.start())
    return result


def strip_headers(source: str) -> str:
    """Remove grammar declarations and non-rule blocks."""
    result = _GRAMMAR_DECL.sub("", source)
    result = remove_blocks(result, _OPTIONS_BLOCK)
    result = remove_blocks(result, _TOKENS_BLOCK)
    result = remove_blocks(result, _NAMED_ACTION)
    result = _IMPORT.sub("", result)
    result = remove_blocks(result, _CHANNELS_BLOCK)
    return _MODE_DECL.sub("", result)


def strip(source: str) -> str:
    """Return ``source`` with comments and header declarations removed."""
    return strip_headers(strip_comments(source))
