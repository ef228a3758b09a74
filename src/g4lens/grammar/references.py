"""Reference extraction: which rules and tokens a rule body mentions."""
from __future__ import annotations

import re
from typing import Final

from g4lens.grammar.keywords import is_keyword
from g4lens.grammar.scanner import QUOTES, skip_braces, skip_char_set, skip_string, strip_actions

_STRING_LITERAL: Final[re.Pattern[str]] = re.compile("'[^']*'|\"[^\"]*\"")
_LINE_COMMENT: Final[re.Pattern[str]] = re.compile(r"//[^\n]*")
_BLOCK_COMMENT: Final[re.Pattern[str]] = re.compile(r"/\*.*?\*/", re.DOTALL)
# The optional ``$`` is captured so that action variables can be dropped
# instead of being read as a bare identifier.
_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"(?<![A-Za-z0-9_$])\$?[A-Za-z_][A-Za-z0-9_]*")

_ELEMENT_OPTIONS: Final[re.Pattern[str]] = re.compile(r"<[^<>]*>")
_LEXER_COMMANDS: Final[re.Pattern[str]] = re.compile(r"->[^|;]*")
_ALT_LABEL: Final[re.Pattern[str]] = re.compile(r"#\s*[A-Za-z_][A-Za-z0-9_]*")
_ELEMENT_LABEL: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\s*\+?=")


def _body(rule_text: str) -> str | None:
    colon = rule_text.find(":")
    return None if colon == -1 else rule_text[colon + 1:]


def extract_references(rule_text: str) -> list[str]:
    """Return the identifiers referenced in a rule's body.

    Everything up to the first ``:`` is discarded, then literals,
    comments and action blocks are removed before identifiers are
    collected.  ANTLR keywords and ``$``-prefixed names are skipped.
    The result is de-duplicated and keeps discovery order.
    """
    body = _body(rule_text)
    if body is None:
        return []

    body = _STRING_LITERAL.sub("", body)
    body = _BLOCK_COMMENT.sub("", _LINE_COMMENT.sub("", body))
    body = strip_actions(body)
    return _identifiers(body)


def _identifiers(body: str) -> list[str]:
    seen: dict[str, None] = {}
    for match in _IDENTIFIER.finditer(body):
        name = match.group(0)
        if name.startswith("$") or is_keyword(name):
            continue
        seen.setdefault(name, None)
    return list(seen)


def _blank_units(body: str) -> str:
    """Replace literals, character sets, actions and comments with a space."""
    parts: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch in QUOTES:
            end = skip_string(body, i)
        elif ch == "[":
            end = skip_char_set(body, i)
        elif ch == "{":
            end = skip_braces(body, i)
        elif body.startswith("//", i):
            end = body.find("\n", i)
            end = len(body) if end == -1 else end
        elif body.startswith("/*", i):
            end = body.find("*/", i + 2)
            end = len(body) if end == -1 else end + 2
        else:
            parts.append(ch)
            i += 1
            continue
        parts.append(" ")
        i = end
    return "".join(parts)


def extract_symbol_references(rule_text: str) -> list[str]:
    """Return only the names in a rule's body that must resolve to a rule.

    Stricter than ``extract_references``: character set contents,
    element labels (``x=`` and ``xs+=``), ``# Label`` alternative tags,
    ``<...>`` element options and ``-> ...`` lexer commands are dropped
    as well, so that what remains are genuine rule and token names.
    """
    body = _body(rule_text)
    if body is None:
        return []

    body = _blank_units(body)
    body = _ELEMENT_OPTIONS.sub(" ", body)
    body = _LEXER_COMMANDS.sub(" ", body)
    body = _ALT_LABEL.sub(" ", body)
    body = _ELEMENT_LABEL.sub(" ", body)
    return _identifiers(body)
