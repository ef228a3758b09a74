"""Performance-risk detection derived from complexity metrics.

Each check fires independently, so one rule can produce several issues:

    ===========================  ========  ============  ==========================
    Check                        Severity  Category      Condition
    ===========================  ========  ============  ==========================
    High backtracking potential  warning   backtracking  alternatives > 5, lookahead > 2
    High lookahead requirement   warning   lookahead     lookahead >= 4
    Deep indirect recursion      info      recursion     indirectly recursive, depth > 3
    Deep nesting                 info      memory        depth > 5
    Critical complexity          error     backtracking  score is critical
    ===========================  ========  ============  ==========================
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from g4lens.graph.reference_graph import ReferenceGraph
from g4lens.models import (
    ComplexityMetrics,
    ComplexityScore,
    IssueCategory,
    PerformanceIssue,
    RuleInfo,
    Severity,
)

BACKTRACKING_MIN_ALTERNATIVES: Final[int] = 5
BACKTRACKING_MIN_LOOKAHEAD: Final[int] = 2
HIGH_LOOKAHEAD: Final[int] = 4
DEEP_RECURSION_DEPTH: Final[int] = 3
DEEP_NESTING_DEPTH: Final[int] = 5


def _issue(
    rule: RuleInfo,
    severity: Severity,
    category: IssueCategory,
    issue: str,
    description: str,
    suggestion: str,
) -> PerformanceIssue:
    return PerformanceIssue(
        rule=rule.name,
        type=rule.type,
        line=rule.line,
        column=rule.column,
        severity=severity,
        issue=issue,
        description=description,
        suggestion=suggestion,
        category=category,
    )


def check_rule(rule: RuleInfo, metrics: ComplexityMetrics) -> list[PerformanceIssue]:
    """Run every performance check against a single rule."""
    issues: list[PerformanceIssue] = []

    if (
        metrics.alternatives > BACKTRACKING_MIN_ALTERNATIVES
        and metrics.lookahead > BACKTRACKING_MIN_LOOKAHEAD
    ):
        issues.append(_issue(
            rule,
            Severity.WARNING,
            IssueCategory.BACKTRACKING,
            "High backtracking potential",
            f"Rule has {metrics.alternatives} alternatives with lookahead of "
            f"{metrics.lookahead}, which may cause excessive backtracking.",
            "Consider reordering alternatives by frequency or refactoring to reduce ambiguity.",
        ))

    if metrics.lookahead >= HIGH_LOOKAHEAD:
        issues.append(_issue(
            rule,
            Severity.WARNING,
            IssueCategory.LOOKAHEAD,
            "High lookahead requirement",
            f"Rule requires estimated lookahead of {metrics.lookahead} tokens.",
            "Consider left-factoring common prefixes or using syntactic predicates.",
        ))

    if metrics.indirectly_recursive and metrics.depth > DEEP_RECURSION_DEPTH:
        issues.append(_issue(
            rule,
            Severity.INFO,
            IssueCategory.RECURSION,
            "Deep indirect recursion",
            f"Rule has indirect recursion with depth {metrics.depth}, "
            "which may cause deep stack usage.",
            "Consider flattening the recursion or adding iteration limits.",
        ))

    if metrics.depth > DEEP_NESTING_DEPTH:
        issues.append(_issue(
            rule,
            Severity.INFO,
            IssueCategory.MEMORY,
            "Deep nesting",
            f"Rule has nesting depth of {metrics.depth}, which increases memory usage.",
            "Consider breaking down into simpler sub-rules.",
        ))

    if metrics.score is ComplexityScore.CRITICAL:
        issues.append(_issue(
            rule,
            Severity.ERROR,
            IssueCategory.BACKTRACKING,
            "Critical complexity",
            f"Rule has critical complexity score ({metrics.complexity_value}). "
            "This may severely impact parse performance.",
            "This rule should be refactored to reduce complexity. "
            "Consider breaking it into smaller rules.",
        ))

    return issues


def detect_performance_issues(
    rules: Sequence[RuleInfo],
    graph: ReferenceGraph,
    complexity: Sequence[ComplexityMetrics],
) -> list[PerformanceIssue]:
    """Return performance issues for every rule that has metrics.

    Issues are ordered most severe first; within a severity they keep
    rule order.  ``graph`` is accepted for symmetry with the other
    detectors; every current check reads the metrics only.
    """
    by_name = {m.name: m for m in complexity}
    issues: list[PerformanceIssue] = []
    for rule in rules:
        metrics = by_name.get(rule.name)
        if metrics is None:
            continue
        issues.extend(check_rule(rule, metrics))

    issues.sort(key=lambda issue: issue.severity.rank)
    return issues
