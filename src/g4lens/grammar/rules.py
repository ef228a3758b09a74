"""Rule extraction: discover rule definitions in a stripped grammar buffer.

Discovery is a single lexical pass over the stripped text.  At every
identifier outside literals, character sets and action blocks the
scanner checks for a rule header (``[fragment] NAME :``); when one is
found, the body runs to the next top-level ``;``.

Registration then happens in three passes with a fixed precedence:

    1. ``fragment NAME : ... ;``  -> ``RuleType.FRAGMENT``
    2. ``NAME : ... ;`` with an uppercase ``NAME``  -> ``RuleType.LEXER``
    3. ``name : ... ;`` with a lowercase ``name``  -> ``RuleType.PARSER``

so the returned list holds fragments first, then lexer rules, then
parser rules, each group in source order.  The first definition of a
name wins; later duplicates are dropped.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from g4lens.grammar.keywords import is_keyword
from g4lens.grammar.references import extract_references
from g4lens.grammar.scanner import (
    QUOTES,
    column_of,
    count_alternatives,
    find_rule_end,
    is_ident_char,
    is_ident_start,
    line_of,
    skip_braces,
    skip_char_set,
    skip_identifier,
    skip_string,
)
from g4lens.models import RuleInfo, RuleType

logger = logging.getLogger(__name__)

_HEADER: Final[re.Pattern[str]] = re.compile(r"(?:(fragment)\s+)?([A-Za-z][A-Za-z0-9_]*)\s*:")


@dataclass(frozen=True, slots=True)
class RuleDefinition:
    """A raw ``name : body ;`` match from the stripped buffer."""

    name: str
    body: str
    is_fragment: bool


def _read_definition(text: str, pos: int) -> tuple[RuleDefinition | None, int]:
    """Try to read a rule definition starting at ``pos``.

    Returns the definition and the index just past its ``;``, or
    ``(None, pos)`` when no complete definition starts here.
    """
    match = _HEADER.match(text, pos)
    if match is None:
        return None, pos
    is_fragment = match.group(1) is not None
    name = match.group(2)
    if is_fragment and not name[0].isupper():
        return None, pos
    end = find_rule_end(text, match.end())
    if end >= len(text):
        return None, pos
    return RuleDefinition(name=name, body=text[match.end():end], is_fragment=is_fragment), end + 1


def scan_definitions(cleaned: str) -> list[RuleDefinition]:
    """Return every rule definition in ``cleaned``, in source order."""
    definitions: list[RuleDefinition] = []
    pos = 0
    while pos < len(cleaned):
        ch = cleaned[pos]
        if ch in QUOTES:
            pos = skip_string(cleaned, pos)
        elif ch == "[":
            pos = skip_char_set(cleaned, pos)
        elif ch == "{":
            pos = skip_braces(cleaned, pos)
        elif is_ident_start(ch) and (pos == 0 or not is_ident_char(cleaned[pos - 1])):
            definition, end = _read_definition(cleaned, pos)
            if definition is not None:
                definitions.append(definition)
                pos = end
            else:
                pos = skip_identifier(cleaned, pos)
        else:
            pos += 1
    return definitions


def find_rule_position(source: str, name: str) -> int:
    """Return the offset of ``name``'s definition in ``source``, or -1.

    The name must start a line or follow whitespace and be followed by
    optional whitespace and ``:``.  The first such occurrence wins.
    """
    match = re.search(rf"(^|\n|\s)({re.escape(name)})\s*:", source, re.MULTILINE)
    return match.start(2) if match else -1


def _declared_as_fragment(source: str, name: str) -> bool:
    return re.search(rf"\bfragment\s+{re.escape(name)}\s*:", source) is not None


def _make_rule(original: str, definition: RuleDefinition, rule_type: RuleType) -> RuleInfo:
    prefix = "fragment " if rule_type is RuleType.FRAGMENT else ""
    text = f"{prefix}{definition.name} :{definition.body};".strip()

    offset = find_rule_position(original, definition.name)
    if offset >= 0:
        line, column = line_of(original, offset), column_of(original, offset)
        end = original.find(";", offset + len(definition.name))
    else:
        line, column, end = 1, 0, -1

    if end >= 0:
        end_line, end_column = line_of(original, end), column_of(original, end) + 1
    else:
        end_line, end_column = line, column

    return RuleInfo(
        name=definition.name,
        type=rule_type,
        line=line,
        column=column,
        end_line=end_line,
        end_column=end_column,
        text=text,
        alternative_count=count_alternatives(text),
        references=tuple(extract_references(text)),
    )


def extract_rules(original: str, cleaned: str) -> list[RuleInfo]:
    """Extract rule definitions.

    Parameters
    ----------
    original:
        The grammar source as written; used for positions and for the
        fragment cross-check.
    cleaned:
        The same source after comment and header stripping; used to
        find the definitions.

    Returns
    -------
    list[RuleInfo]
        Fragments, then lexer rules, then parser rules.
    """
    definitions = scan_definitions(cleaned)
    rules: list[RuleInfo] = []
    claimed: set[str] = set()

    for definition in definitions:
        if definition.is_fragment and definition.name not in claimed:
            claimed.add(definition.name)
            rules.append(_make_rule(original, definition, RuleType.FRAGMENT))

    for definition in definitions:
        name = definition.name
        if definition.is_fragment or not name[0].isupper() or name in claimed:
            continue
        # A ``fragment NAME :`` anywhere in the original text, even inside a
        # comment, blocks the lexer registration.
        if _declared_as_fragment(original, name):
            continue
        claimed.add(name)
        rules.append(_make_rule(original, definition, RuleType.LEXER))

    for definition in definitions:
        name = definition.name
        if definition.is_fragment or not name[0].islower() or name in claimed:
            continue
        if is_keyword(name):
            continue
        claimed.add(name)
        rules.append(_make_rule(original, definition, RuleType.PARSER))

    logger.debug("Extracted %d rule(s) from %d definition(s)", len(rules), len(definitions))
    return rules
