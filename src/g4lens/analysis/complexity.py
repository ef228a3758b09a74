"""Heuristic complexity metrics per rule.

The composite value is a weighted sum::

    depth * 5 + alternatives * 3 + references * 2 + lookahead * 4
    + 15 if directly recursive + 25 if indirectly recursive

and is bucketed against the configured thresholds: ``critical`` at or
above the critical threshold, ``high`` at or above the high threshold,
``medium`` at or above half the high threshold, ``low`` otherwise.

The lookahead figure is an estimate for guidance, not ANTLR's computed
k value.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from g4lens.analysis.options import AnalysisOptions
from g4lens.grammar.scanner import first_token_prefix, nesting_depth, split_alternatives
from g4lens.graph.reference_graph import ReferenceGraph
from g4lens.models import ComplexityMetrics, ComplexityScore, RuleInfo

# Score weights
DEPTH_WEIGHT: Final[int] = 5
ALTERNATIVE_WEIGHT: Final[int] = 3
REFERENCE_WEIGHT: Final[int] = 2
LOOKAHEAD_WEIGHT: Final[int] = 4
DIRECT_RECURSION_PENALTY: Final[int] = 15
INDIRECT_RECURSION_PENALTY: Final[int] = 25

# Lookahead estimate
BASE_LOOKAHEAD: Final[int] = 1
COMMON_PREFIX_LOOKAHEAD: Final[int] = 2
COMMON_PREFIX_LOOKAHEAD_CAP: Final[int] = 5
OPTIONAL_ELEMENT_LOOKAHEAD: Final[int] = 1
DEEP_NESTING_DEPTH: Final[int] = 2
MAX_LOOKAHEAD: Final[int] = 10


@dataclass(frozen=True, slots=True)
class RecursionInfo:
    """Names of directly and indirectly recursive rules.

    The two sets are disjoint: a rule that references itself is only
    reported as direct, even if it also sits on a longer cycle.
    """

    directly_recursive: frozenset[str]
    indirectly_recursive: frozenset[str]


def detect_recursion(rules: Sequence[RuleInfo], graph: ReferenceGraph) -> RecursionInfo:
    """Classify rules as directly or indirectly recursive.

    A rule is indirectly recursive when some *other* rule reachable from
    it references it again, i.e. it lies on a cycle longer than one.
    """
    direct: set[str] = set()
    indirect: set[str] = set()
    for rule in rules:
        node = graph.get(rule.name)
        if node is None:
            continue
        if rule.name in node.references:
            direct.add(rule.name)
            continue
        if any(
            rule.name in graph[other].references
            for other in graph.reachable_from(rule.name)
            if other != rule.name
        ):
            indirect.add(rule.name)
    return RecursionInfo(frozenset(direct), frozenset(indirect))


def estimate_lookahead(rule_text: str) -> int:
    """Estimate how many tokens of lookahead a rule needs."""
    lookahead = BASE_LOOKAHEAD

    alternatives = split_alternatives(rule_text)
    if len(alternatives) > 1:
        prefixes = {first_token_prefix(alt).lower() for alt in alternatives}
        if len(prefixes) < len(alternatives):
            lookahead = min(lookahead + COMMON_PREFIX_LOOKAHEAD, COMMON_PREFIX_LOOKAHEAD_CAP)

    if "?" in rule_text or "*" in rule_text:
        lookahead += OPTIONAL_ELEMENT_LOOKAHEAD

    depth = nesting_depth(rule_text)
    if depth > DEEP_NESTING_DEPTH:
        lookahead += depth // 2

    return min(lookahead, MAX_LOOKAHEAD)


def score_complexity(
    depth: int,
    alternatives: int,
    reference_count: int,
    lookahead: int,
    directly_recursive: bool,
    indirectly_recursive: bool,
    high_threshold: float = 50,
    critical_threshold: float = 100,
) -> tuple[int, ComplexityScore]:
    """Return the composite complexity value and its bucket."""
    value = (
        depth * DEPTH_WEIGHT
        + alternatives * ALTERNATIVE_WEIGHT
        + reference_count * REFERENCE_WEIGHT
        + lookahead * LOOKAHEAD_WEIGHT
    )
    if directly_recursive:
        value += DIRECT_RECURSION_PENALTY
    if indirectly_recursive:
        value += INDIRECT_RECURSION_PENALTY

    if value >= critical_threshold:
        score = ComplexityScore.CRITICAL
    elif value >= high_threshold:
        score = ComplexityScore.HIGH
    elif value >= high_threshold / 2:
        score = ComplexityScore.MEDIUM
    else:
        score = ComplexityScore.LOW
    return value, score


def calculate_complexity(
    rules: Sequence[RuleInfo],
    graph: ReferenceGraph,
    options: AnalysisOptions | None = None,
) -> list[ComplexityMetrics]:
    """Compute metrics for every rule, most complex first."""
    options = options or AnalysisOptions()
    recursion = detect_recursion(rules, graph)

    metrics: list[ComplexityMetrics] = []
    for rule in rules:
        depth = nesting_depth(rule.text)
        reference_count = len(graph.references_of(rule.name))
        lookahead = estimate_lookahead(rule.text)
        direct = rule.name in recursion.directly_recursive
        indirect = rule.name in recursion.indirectly_recursive
        value, score = score_complexity(
            depth,
            rule.alternative_count,
            reference_count,
            lookahead,
            direct,
            indirect,
            high_threshold=options.high_complexity_threshold,
            critical_threshold=options.critical_complexity_threshold,
        )
        metrics.append(ComplexityMetrics(
            name=rule.name,
            type=rule.type,
            line=rule.line,
            depth=depth,
            alternatives=rule.alternative_count,
            reference_count=reference_count,
            directly_recursive=direct,
            indirectly_recursive=indirect,
            lookahead=lookahead,
            score=score,
            complexity_value=value,
        ))

    metrics.sort(key=lambda m: m.complexity_value, reverse=True)
    return metrics
