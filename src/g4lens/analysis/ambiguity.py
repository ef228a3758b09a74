"""Ambiguity hints: parser-rule alternatives that start with the same token.

A shared first token is a common, not definitive, sign that the parser
needs more lookahead to pick an alternative.  Prefixes are compared
case-insensitively; alternatives whose first element is neither a
literal nor an identifier (a parenthesized block, an action) have no
prefix and are never grouped.
"""
from __future__ import annotations

from collections.abc import Sequence

from g4lens.grammar.scanner import first_token_prefix, split_alternatives
from g4lens.models import AmbiguityHint, RuleInfo, RuleType


def group_by_prefix(alternatives: Sequence[str]) -> dict[str, list[int]]:
    """Map each lower-cased first-token prefix to the 0-based indices using it."""
    groups: dict[str, list[int]] = {}
    for index, alternative in enumerate(alternatives):
        groups.setdefault(first_token_prefix(alternative).lower(), []).append(index)
    return groups


def detect_ambiguity_hints(rules: Sequence[RuleInfo]) -> list[AmbiguityHint]:
    """Return one hint per group of two or more alternatives sharing a prefix."""
    hints: list[AmbiguityHint] = []
    for rule in rules:
        if rule.type is not RuleType.PARSER:
            continue
        alternatives = split_alternatives(rule.text)
        if len(alternatives) < 2:
            continue

        for prefix, indices in group_by_prefix(alternatives).items():
            if not prefix or len(indices) < 2:
                continue
            positions = ", ".join(str(i + 1) for i in indices)
            hints.append(AmbiguityHint(
                rule=rule.name,
                line=rule.line,
                alternative_indices=tuple(indices),
                common_prefix=(prefix,),
                description=(
                    f"Alternatives {positions} start with the same token '{prefix}', "
                    "which may cause ambiguity."
                ),
            ))
    return hints
