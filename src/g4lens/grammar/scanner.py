"""Character-level sub-scanners shared by the grammar extractors.

ANTLR grammar text is never parsed here.  Every routine is a small,
bounds-checked scan over a string that understands just enough of the
surface syntax (quoted literals, ``[...]`` character sets, ``{...}``
action blocks, bracket nesting) to segment rules and alternatives.

None of these functions raise on malformed input: an unterminated
string, set, or block simply runs to the end of the text, which only
affects the accuracy of the result.

Two flavours of string tracking coexist on purpose:

    - The *skip* helpers (``skip_string``, ``skip_char_set``,
      ``skip_braces``) consume a construct as a unit and honour
      backslash escapes.  They are used to find rule boundaries.
    - The *metric* helpers (``count_alternatives``, ``nesting_depth``,
      ``split_alternatives``) toggle string state on a quote whose
      previous character is not a backslash.  Complexity scores are
      calibrated against this behaviour, so it must stay as is.
"""
from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Final

QUOTES: Final[str] = "'\""

_OPENERS: Final[str] = "([{"
_CLOSERS: Final[str] = ")]}"

_IDENT_START: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_]")
_IDENT_CONT: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_]")
_FIRST_TOKEN: Final[re.Pattern[str]] = re.compile(
    r"""^\s*(?:'[^']*'|"[^"]*"|[a-zA-Z_][a-zA-Z0-9_]*)"""
)


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------


def is_ident_start(ch: str) -> bool:
    """Return True if ``ch`` can begin an identifier."""
    return bool(ch) and _IDENT_START.match(ch) is not None


def is_ident_char(ch: str) -> bool:
    """Return True if ``ch`` can continue an identifier."""
    return bool(ch) and _IDENT_CONT.match(ch) is not None


def skip_identifier(text: str, pos: int) -> int:
    """Return the index just past the identifier starting at ``pos``."""
    end = pos
    while end < len(text) and is_ident_char(text[end]):
        end += 1
    return max(end, pos + 1)


# ---------------------------------------------------------------------------
# Unit skippers
# ---------------------------------------------------------------------------


def skip_string(text: str, pos: int) -> int:
    """Skip the quoted literal opening at ``pos``.

    Returns the index just past the closing quote.  ANTLR literals never
    span lines, so an unterminated literal stops at the next newline
    (or the end of the text) instead of swallowing the rest of the file.
    """
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            return i
        i += 1
    return len(text)


def skip_char_set(text: str, pos: int) -> int:
    """Skip the ``[...]`` character set (or argument list) opening at ``pos``.

    Quotes inside a set are ordinary characters, so ``["\\\\/]`` must not
    start a string literal.
    """
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "]":
            return i + 1
        i += 1
    return len(text)


def skip_braces(text: str, pos: int) -> int:
    """Skip the ``{...}`` block opening at ``pos``, counting nested braces."""
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return len(text)


def find_rule_end(text: str, pos: int) -> int:
    """Return the index of the first top-level ``;`` at or after ``pos``.

    Literals, character sets and action blocks are skipped as units, so a
    ``';'`` token or an action such as ``{ x = 1; }`` does not end the
    rule.  Returns ``len(text)`` when no terminator exists.
    """
    i = pos
    while i < len(text):
        ch = text[i]
        if ch in QUOTES:
            i = skip_string(text, i)
        elif ch == "[":
            i = skip_char_set(text, i)
        elif ch == "{":
            i = skip_braces(text, i)
        elif ch == ";":
            return i
        else:
            i += 1
    return len(text)


def strip_actions(text: str) -> str:
    """Remove ``{...}`` action blocks, braces included.

    Only characters at brace depth zero survive.  A stray ``}`` drives the
    depth negative and hides everything after it, and removing a block
    can glue its neighbours together (``a{...}b`` becomes ``ab``).
    """
    kept: list[str] = []
    depth = 0
    for ch in text:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif depth == 0:
            kept.append(ch)
    return "".join(kept)


# ---------------------------------------------------------------------------
# Metric helpers
# ---------------------------------------------------------------------------


def _code_chars(text: str) -> Iterator[str]:
    """Yield the characters of ``text`` that lie outside quoted literals.

    Quote characters themselves are never yielded.
    """
    in_string = False
    quote = ""
    for i, ch in enumerate(text):
        if ch in QUOTES and (i == 0 or text[i - 1] != "\\"):
            if not in_string:
                in_string = True
                quote = ch
            elif ch == quote:
                in_string = False
            continue
        if not in_string:
            yield ch


def count_alternatives(rule_text: str) -> int:
    """Count the top-level alternatives of a rule.

    Every ``|`` outside literals and outside parentheses adds one; a rule
    with no ``|`` has a single alternative.
    """
    count = 1
    depth = 0
    for ch in _code_chars(rule_text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "|" and depth == 0:
            count += 1
    return count


def nesting_depth(rule_text: str) -> int:
    """Return the maximum ``(``/``[`` nesting depth outside literals."""
    max_depth = 0
    depth = 0
    for ch in _code_chars(rule_text):
        if ch in "([":
            depth += 1
            max_depth = max(max_depth, depth)
        elif ch in ")]":
            depth -= 1
    return max_depth


def split_alternatives(rule_text: str) -> list[str]:
    """Split a rule's body into its top-level alternatives.

    The body is everything after the first ``:``.  Splits happen on ``|``
    outside literals and outside ``()``, ``[]`` and ``{}``.  Each piece is
    trimmed, and the rule terminator is dropped from the last one.
    """
    colon = rule_text.find(":")
    if colon == -1:
        return [rule_text]

    body = rule_text[colon + 1:]
    alternatives: list[str] = []
    current: list[str] = []
    depth = 0
    in_string = False
    quote = ""

    for i, ch in enumerate(body):
        if ch in QUOTES and (i == 0 or body[i - 1] != "\\"):
            if not in_string:
                in_string = True
                quote = ch
            elif ch == quote:
                in_string = False

        if not in_string:
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS:
                depth -= 1
            elif ch == "|" and depth == 0:
                alternatives.append("".join(current).strip())
                current = []
                continue

        current.append(ch)

    tail = "".join(current).strip()
    if tail:
        alternatives.append(tail[:-1] if tail.endswith(";") else tail)
    return alternatives


def first_token_prefix(alternative: str) -> str:
    """Return the leading literal or identifier of an alternative, or ``""``."""
    match = _FIRST_TOKEN.match(alternative)
    return match.group(0).strip() if match else ""


# ---------------------------------------------------------------------------
# Positions
# ---------------------------------------------------------------------------


def line_of(text: str, offset: int) -> int:
    """Return the 1-based line number of ``offset`` in ``text``."""
    return text.count("\n", 0, max(offset, 0)) + 1


def column_of(text: str, offset: int) -> int:
    """Return the 0-based column of ``offset`` in ``text``."""
    return offset - text.rfind("\n", 0, max(offset, 0)) - 1
