"""Unused-rule detection."""
from __future__ import annotations

from collections.abc import Sequence

from g4lens.graph.reference_graph import ReferenceGraph
from g4lens.models import RuleInfo, RuleType, UnusedRule


def _suggestion(rule: RuleInfo) -> str:
    if rule.type is RuleType.FRAGMENT:
        return f"Fragment '{rule.name}' is never used by other lexer rules. Consider removing it."
    return f"Rule '{rule.name}' is never referenced. Consider removing it or making it the start rule."


def detect_unused_rules(
    rules: Sequence[RuleInfo],
    graph: ReferenceGraph,
    start_rule: str = "",
) -> list[UnusedRule]:
    """Return rules that no other rule references, in ``rules`` order.

    The start rule (compared case-insensitively) is never reported.  When
    no start rule is configured, the first parser rule is treated as the
    implicit start rule and exempted instead.
    """
    implicit_start = None
    if not start_rule:
        implicit_start = next((r.name for r in rules if r.type is RuleType.PARSER), None)

    unused: list[UnusedRule] = []
    for rule in rules:
        node = graph.get(rule.name)
        if node is None or node.referenced_by:
            continue
        if rule.name.lower() == start_rule.lower():
            continue
        if rule.name == implicit_start:
            continue
        unused.append(UnusedRule(
            name=rule.name,
            type=rule.type,
            line=rule.line,
            column=rule.column,
            suggestion=_suggestion(rule),
        ))
    return unused
