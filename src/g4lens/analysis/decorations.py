"""Editor decorations: findings projected onto source spans.

A ``Decoration`` marks the name of the rule a finding belongs to, using
1-based line and column numbers as most editors expect, and carries the
hover text to show there.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from g4lens.models import AnalysisResult, ComplexityMetrics, ComplexityScore, Severity


class DecorationSource(str, Enum):
    """Which analysis produced a decoration."""

    UNUSED = "unused"
    PERFORMANCE = "performance"
    COMPLEXITY = "complexity"
    AMBIGUITY = "ambiguity"


@dataclass(frozen=True, slots=True)
class Decoration:
    """A highlighted source range with a message.

    Parameters
    ----------
    start_line, start_column:
        1-based start of the range.
    end_line, end_column:
        1-based, exclusive end of the range.
    severity:
        How the range should be highlighted.
    message:
        Hover text.
    source:
        The analysis that produced it.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    severity: Severity
    message: str
    source: DecorationSource


def _span(line: int, column: int, name: str, severity: Severity, message: str,
          source: DecorationSource) -> Decoration:
    return Decoration(
        start_line=line,
        start_column=column + 1,
        end_line=line,
        end_column=column + len(name) + 1,
        severity=severity,
        message=message,
        source=source,
    )


def _complexity_message(metrics: ComplexityMetrics) -> str:
    message = (
        f"Complexity: {metrics.score.value} (score: {metrics.complexity_value})\n"
        f"Depth: {metrics.depth}, Alternatives: {metrics.alternatives}, "
        f"References: {metrics.reference_count}"
    )
    if metrics.directly_recursive:
        message += "\nDirectly recursive"
    if metrics.indirectly_recursive:
        message += "\nIndirectly recursive"
    return message


def build_decorations(result: AnalysisResult | None) -> list[Decoration]:
    """Return decorations for every finding in ``result``.

    Order: unused rules, performance issues, high and critical complexity
    entries, ambiguity hints.  ``None`` yields an empty list.
    """
    if result is None:
        return []

    decorations: list[Decoration] = []

    for unused in result.unused_rules:
        decorations.append(_span(
            unused.line, unused.column, unused.name,
            Severity.WARNING, unused.suggestion, DecorationSource.UNUSED,
        ))

    for issue in result.performance_issues:
        decorations.append(_span(
            issue.line, issue.column, issue.rule, issue.severity,
            f"{issue.issue}: {issue.description}\n\nSuggestion: {issue.suggestion}",
            DecorationSource.PERFORMANCE,
        ))

    for metrics in result.complexity:
        if metrics.score not in (ComplexityScore.HIGH, ComplexityScore.CRITICAL):
            continue
        rule = result.rule(metrics.name)
        if rule is None:
            continue
        severity = Severity.ERROR if metrics.score is ComplexityScore.CRITICAL else Severity.WARNING
        decorations.append(_span(
            rule.line, rule.column, rule.name, severity,
            _complexity_message(metrics), DecorationSource.COMPLEXITY,
        ))

    for hint in result.ambiguity_hints:
        rule = result.rule(hint.rule)
        if rule is None:
            continue
        decorations.append(_span(
            hint.line, rule.column, rule.name,
            Severity.INFO, hint.description, DecorationSource.AMBIGUITY,
        ))

    return decorations
